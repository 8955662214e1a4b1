"""Config fingerprint shared by the audit simulation and the state endpoint.

The hash covers only settings that change game outcomes or payouts, so two
runs with the same hash and seed are directly comparable.
"""
import hashlib
import json

from diamond_hunt.config import Settings, settings as default_settings


def get_config_hash(settings: Settings | None = None) -> str:
    """
    Generate hash of the outcome-relevant configuration.

    Returns 16-char hex hash of config snapshot.
    """
    settings = settings or default_settings
    config_snapshot = {
        "luck_weight_tilt": settings.luck_weight_tilt,
        "bonus_multiplier": settings.bonus_multiplier,
        "base_multiplier_chance": settings.base_multiplier_chance,
        "multiplier_chance_floor": settings.multiplier_chance_floor,
        "multiplier_chance_ceiling": settings.multiplier_chance_ceiling,
    }
    canonical = json.dumps(config_snapshot, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]
