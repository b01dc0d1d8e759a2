# ╔════════════════════════════════════════════════════════════════════════════╗
# ║                           RATE LIMITER MODULE                              ║
# ║    Write pacers used between Discord API calls during a sync pass          ║
# ╚════════════════════════════════════════════════════════════════════════════╝

# Standard library imports
import asyncio
import time
from typing import Dict

# Local application imports
from utils.logging import logger

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ FIXED DELAY PACER                                                          ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class FixedDelayPacer:
    # --- FixedDelayPacer ---
    # Sleeps for a fixed interval after every write. This is the pacing the
    # reconciler uses by default: one second between scheduled-event writes
    # keeps a pass under Discord's per-guild write limit.

    def __init__(self, delay_seconds: float = 1.0):
        if delay_seconds < 0:
            raise ValueError("delay_seconds must not be negative")
        self.delay_seconds = delay_seconds
        self.wait_count = 0

    # --- wait ---
    # Suspend until the next write may be issued.
    async def wait(self) -> None:
        self.wait_count += 1
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)

    def get_stats(self) -> Dict[str, float]:
        return {"delay_seconds": self.delay_seconds, "wait_count": self.wait_count}


class NoDelayPacer(FixedDelayPacer):
    """Pacer that never sleeps. Used by tests and dry environments."""

    def __init__(self):
        super().__init__(delay_seconds=0.0)

# ╔════════════════════════════════════════════════════════════════════════════╗
# ║ TOKEN BUCKET IMPLEMENTATION                                                ║
# ╚════════════════════════════════════════════════════════════════════════════╝

class TokenBucketPacer:
    # --- TokenBucketPacer ---
    # Implements the token bucket algorithm for pacing API writes.
    #
    # The algorithm works by:
    # 1. Adding tokens to a bucket at a fixed rate (token_refill_rate)
    # 2. Letting each write consume one token
    # 3. Suspending the caller when the bucket is empty
    #
    # This allows for bursts of activity (up to max_tokens) while
    # maintaining a sustainable long-term average rate.

    # --- __init__ ---
    # Args:
    #     name: Name of the pacer for logging
    #     max_tokens: Maximum number of tokens the bucket can hold
    #     token_refill_rate: Rate at which tokens are added (tokens per second)
    def __init__(self, name: str, max_tokens: float, token_refill_rate: float, clock=time.monotonic):
        if max_tokens <= 0 or token_refill_rate <= 0:
            raise ValueError("max_tokens and token_refill_rate must be positive")
        self.name = name
        self.max_tokens = max_tokens
        self.token_refill_rate = token_refill_rate
        self._clock = clock

        self.tokens = max_tokens  # Start with a full bucket
        self.last_refill = clock()
        self.request_count = 0
        self.throttled_count = 0

        logger.debug(f"Initialized pacer '{name}' with {max_tokens} max tokens, "
                     f"refill rate of {token_refill_rate} tokens/sec")

    # --- _refill ---
    # Refill tokens based on elapsed time since last refill.
    def _refill(self):
        now = self._clock()
        elapsed = now - self.last_refill
        self.tokens = min(self.tokens + elapsed * self.token_refill_rate, self.max_tokens)
        self.last_refill = now

    # --- wait ---
    # Consume one token, sleeping first if the bucket is empty.
    async def wait(self) -> None:
        self.request_count += 1
        self._refill()
        if self.tokens < 1.0:
            self.throttled_count += 1
            wait_time = (1.0 - self.tokens) / self.token_refill_rate
            logger.debug(f"Pacer '{self.name}' waiting for {wait_time:.2f}s")
            await asyncio.sleep(wait_time)
            self._refill()
        self.tokens = max(self.tokens - 1.0, 0.0)

    # --- get_stats ---
    # Returns: Dictionary with pacer statistics
    def get_stats(self) -> Dict[str, float]:
        self._refill()
        return {
            "name": self.name,
            "tokens": self.tokens,
            "max_tokens": self.max_tokens,
            "request_count": self.request_count,
            "throttled_count": self.throttled_count,
            "throttle_ratio": self.throttled_count / self.request_count if self.request_count else 0
        }
