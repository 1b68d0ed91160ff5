__all__ = [
    # Settings / context
    "Settings",
    "ExecutionContext",
    "load_context",
    # Account and calls
    "Call",
    "ExecutionEncoding",
    "InvocableAccount",
    "build_account",
    "encode_call",
    "get_selector_from_name",
    # Submission
    "InvokeTransactionResult",
    "submit",
    # Network / signing
    "JsonRpcClient",
    "Provider",
    "Signer",
    "StarkSigner",
    # Chains
    "SN_MAIN",
    "SN_SEPOLIA",
    # Felts
    "FIELD_PRIME",
    "FeltError",
    "format_felt",
    "parse_felt",
    # Errors
    "StarkInvokeError",
    "ConfigurationError",
    "EncodingError",
    "SubmissionError",
    "NetworkError",
    "SigningError",
    "NodeRejectedError",
    "MalformedResponseError",
]

from .config import SN_MAIN, SN_SEPOLIA, Settings
from .context import ExecutionContext, load_context
from .errors import (
    ConfigurationError,
    EncodingError,
    MalformedResponseError,
    NetworkError,
    NodeRejectedError,
    SigningError,
    StarkInvokeError,
    SubmissionError,
)
from .pneuma.account import ExecutionEncoding, InvocableAccount, build_account
from .pneuma.call import Call, encode_call, get_selector_from_name
from .pneuma.rpc import JsonRpcClient, Provider
from .pneuma.tx import InvokeTransactionResult, submit
from .sigil.stark import Signer, StarkSigner
from .utils import FIELD_PRIME, FeltError, format_felt, parse_felt
