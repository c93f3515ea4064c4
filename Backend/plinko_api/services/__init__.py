from plinko_api.services.engine import (
    MismatchReason,
    RoundOutcome,
    VerificationResult,
    evaluate,
    verify,
)
from plinko_api.services.errors import PlinkoError, ValidationError
from plinko_api.services.fairness import commit, combine, generate_server_seed
from plinko_api.services.payout import PayoutTable, default_paytable

__all__ = [
    "MismatchReason",
    "PayoutTable",
    "PlinkoError",
    "RoundOutcome",
    "ValidationError",
    "VerificationResult",
    "combine",
    "commit",
    "default_paytable",
    "evaluate",
    "generate_server_seed",
    "verify",
]
