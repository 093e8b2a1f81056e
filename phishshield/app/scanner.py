"""
scanner.py
Host-side scan pipeline: input check, scoring, counter bookkeeping.
"""

import os
import time
import logging
import threading
from typing import Optional

from .heuristics import analyze, HIGH_RISK_SCORE
from ..db import CounterStore

logger = logging.getLogger("scanner")

# Artificial "scanning" pause before scoring; 0 disables it
SCAN_DELAY_SECONDS = float(os.getenv("PHISHSHIELD_SCAN_DELAY", "0"))

# A scan counts as blocked when it lands in the High Risk tier
BLOCK_THRESHOLD = HIGH_RISK_SCORE

EXAMPLE_URLS = [
    "https://www.google.com",
    "http://accounts-verification-security-update.com/login",
    "https://192.168.1.1/admin/login.php",
    "https://paypal.security.verify-account-now.tk/signin",
]

_counter_lock = threading.Lock()


class EmptyURLError(ValueError):
    pass


def scan_url(url: str, store: CounterStore, delay: Optional[float] = None) -> dict:
    """
    Score ``url`` and record the scan in ``store``.

    Blank input is rejected before the analyzer runs. Non-blank input is
    scored exactly as given, surrounding whitespace included.
    """
    if not url or not url.strip():
        raise EmptyURLError("empty url")

    if delay is None:
        delay = SCAN_DELAY_SECONDS
    if delay > 0:
        time.sleep(delay)

    verdict = analyze(url)
    blocked = verdict.risk_score >= BLOCK_THRESHOLD

    with _counter_lock:
        counters = store.load().bump(blocked)
        store.save(counters)

    logger.info("Scanned url=%r score=%d status=%s", url, verdict.risk_score, verdict.status)

    return {
        "url": url,
        "verdict": verdict.to_dict(),
        "blocked": blocked,
        # percentage bar only; the verdict keeps the raw score
        "display_score": min(verdict.risk_score, 100),
        "stats": counters.to_dict(),
    }
