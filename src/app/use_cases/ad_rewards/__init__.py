from .get_ad_reward_state import GetAdRewardState
from .claim_ad_reward import ClaimAdReward
from .ad_reward_settings import AdRewardSettings
from .dtos import AdRewardStateDTO, AdClaimResponseDTO

__all__ = [
    "GetAdRewardState",
    "ClaimAdReward",
    "AdRewardSettings",
    "AdRewardStateDTO",
    "AdClaimResponseDTO",
]
