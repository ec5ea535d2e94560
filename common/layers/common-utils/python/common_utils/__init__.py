# Module Metadata
__author__ = "Koushik Sinha"
__version__ = "1.1.0"
__modified_by__ = "Koushik Sinha"

from .logging_utils import configure_logger
from .get_ssm import (
    get_values_from_ssm,
    get_environment_prefix,
    get_config,
    split_csv,
)
from .lambda_response import lambda_response
from .error_utils import log_exception
from .s3_utils import iter_s3_records, iter_s3_objects

__all__ = [
    "get_values_from_ssm",
    "get_environment_prefix",
    "get_config",
    "split_csv",
    "configure_logger",
    "lambda_response",
    "log_exception",
    "iter_s3_records",
    "iter_s3_objects",
]
