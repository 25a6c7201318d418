from sharelink.api.ratelimit.orm.rate_limit_model import RateLimitModel

__all__ = ["RateLimitModel"]
