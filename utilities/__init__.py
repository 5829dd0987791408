from .utilities import func_logger, configure_logging
