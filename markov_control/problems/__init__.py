from .gambler import CoinGamblerProblem

__all__ = ["CoinGamblerProblem"]
