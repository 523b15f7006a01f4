from .maintenance import deactivate_expired_biometric_tokens, recalculate_scores, recalculate_trust_scores

__all__ = [
    "deactivate_expired_biometric_tokens",
    "recalculate_scores",
    "recalculate_trust_scores",
]
