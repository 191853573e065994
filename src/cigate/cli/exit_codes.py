# mirror <sysexits.h>
EXIT_OK = 0  # Normal success
EXIT_GENERIC = 1  # Generic failure (a service build failed)
EXIT_UNSTABLE = 3  # Coverage below threshold or build unstable
EXIT_DATAERR = 65  # Input data was invalid (e.g., malformed coverage report)
EXIT_NOINPUT = 66  # Input file not found (e.g., coverage report missing)
EXIT_SOFTWARE = 70  # External collaborator failed (git, build tool)
EXIT_CONFIG = 78  # Invalid configuration (e.g., bad cigate.toml)
