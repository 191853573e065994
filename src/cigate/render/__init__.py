from cigate.render.human import render_result_human, render_selection_human
from cigate.render.json import format_json, get_schema
from cigate.render.plain import render_result_plain, render_selection_plain

__all__ = [
    "format_json",
    "get_schema",
    "render_result_human",
    "render_result_plain",
    "render_selection_human",
    "render_selection_plain",
]
