from .bond import BondArguments, Coupon, FixedRateBond
from .swap import AccrualPeriod, SwapArguments, SwapResults, VanillaSwap
from .swaption import Settlement, Swaption, SwaptionArguments
