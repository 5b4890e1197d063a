"""binwrap: download, verify and locate platform-specific binaries."""

__version__ = "0.3.0"

from binwrap.core.config import Configuration, ConfigError, load_config  # noqa: E402
from binwrap.core.errors import (  # noqa: E402
    BinaryNotWorking,
    BinError,
    ChmodFailed,
    DownloadFailed,
    ExistenceCheckFailed,
    InvalidConfiguration,
    InvalidUrl,
    InvalidVersionRange,
    NoMatchingBinary,
    PathTraversal,
    VersionMismatch,
)
from binwrap.core.result import Err, Ok, Result, is_err, is_ok  # noqa: E402
from binwrap.pipeline import AcquisitionPipeline, PipelineState  # noqa: E402
from binwrap.sources import SourceDescriptor, filter_sources  # noqa: E402
from binwrap.wrapper import BinWrapper  # noqa: E402

__all__ = [
    "__version__",
    # builder
    "BinWrapper",
    "Configuration",
    "ConfigError",
    "load_config",
    # pipeline
    "AcquisitionPipeline",
    "PipelineState",
    "SourceDescriptor",
    "filter_sources",
    # errors
    "BinaryNotWorking",
    "BinError",
    "ChmodFailed",
    "DownloadFailed",
    "ExistenceCheckFailed",
    "InvalidConfiguration",
    "InvalidUrl",
    "InvalidVersionRange",
    "NoMatchingBinary",
    "PathTraversal",
    "VersionMismatch",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
