# mirror <sysexits.h>
EXIT_OK = 0  # Normal success
EXIT_GENERIC = 1  # Generic failure (fallback)
EXIT_PARTIAL = 2  # Some badges failed; the rest were written
EXIT_DATAERR = 65  # Input data was invalid (e.g., unknown badge type)
EXIT_CANTCREAT = 73  # Output location could not be created
EXIT_CONFIG = 78  # Invalid configuration (e.g., bad pyproject.toml)
