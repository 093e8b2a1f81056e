"""
heuristics.py

Explainable URL risk scoring for phishing detection.

Public functions:
    analyze(url: str) -> Verdict
    classify(score: int) -> tuple(status, message, tier)

Example:
    >>> from phishshield.app.heuristics import analyze
    >>> analyze("https://192.168.1.1/admin/login.php").status
    'High Risk'

The analyzer never trims, decodes or lowercases its input (except where a
single rule says so) and never raises: any string, URL or not, gets a score.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

# Tunable thresholds and weights
LONG_URL_LENGTH = 75
MODERATE_URL_LENGTH = 54
SPECIAL_CHAR_LIMIT = 5
DOT_LIMIT = 3

WEIGHT_LONG_URL = 25
WEIGHT_MODERATE_URL = 15
WEIGHT_NO_HTTPS = 30
WEIGHT_IP_ADDRESS = 35
WEIGHT_SPECIAL_CHARS = 20
WEIGHT_SUBDOMAINS = 15
WEIGHT_KEYWORDS = 20
WEIGHT_SHORTENER = 15
WEIGHT_HOMOGRAPH = 30

HIGH_RISK_SCORE = 60
MEDIUM_RISK_SCORE = 30

SUSPICIOUS_KEYWORDS = ('login', 'verify', 'account', 'update', 'secure', 'banking', 'confirm')
SHORTENERS = ('bit.ly', 'tinyurl', 'goo.gl', 't.co', 'ow.ly')
SPECIAL_CHARS = '@-_'

# Fixed-width groups only, so matching stays linear in the input length.
IP_RE = re.compile(r'[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}')
# Basic Cyrillic letters А..я (U+0410..U+044F)
CYRILLIC_RE = re.compile('[\u0410-\u044f]')


@dataclass(frozen=True)
class Factor:
    name: str
    risk: str  # low | medium | high
    points: int

    def to_dict(self) -> Dict:
        return {"name": self.name, "risk": self.risk, "points": self.points}


@dataclass(frozen=True)
class Verdict:
    """Result of one analysis. ``factors`` keeps detector evaluation order."""
    status: str
    message: str
    tier: str  # green | yellow | red
    risk_score: int
    factors: Tuple[Factor, ...]

    def to_dict(self) -> Dict:
        return {
            "status": self.status,
            "message": self.message,
            "tier": self.tier,
            "riskScore": self.risk_score,
            "factors": [f.to_dict() for f in self.factors],
        }


def url_length(url: str) -> int:
    """Length in UTF-16 code units; astral characters count twice."""
    return len(url.encode("utf-16-le", "surrogatepass")) // 2


def _check_length(url: str) -> Optional[Factor]:
    length = url_length(url)
    if length > LONG_URL_LENGTH:
        return Factor("Unusually long URL", "high", WEIGHT_LONG_URL)
    if length > MODERATE_URL_LENGTH:
        return Factor("Moderately long URL", "medium", WEIGHT_MODERATE_URL)
    return None


def _check_https(url: str) -> Optional[Factor]:
    if not url.startswith('https://'):
        return Factor("No HTTPS encryption", "high", WEIGHT_NO_HTTPS)
    return None


def _check_ip_address(url: str) -> Optional[Factor]:
    if IP_RE.search(url):
        return Factor("Contains IP address", "high", WEIGHT_IP_ADDRESS)
    return None


def _check_special_chars(url: str) -> Optional[Factor]:
    count = sum(url.count(ch) for ch in SPECIAL_CHARS)
    if count > SPECIAL_CHAR_LIMIT:
        return Factor("Excessive special characters", "medium", WEIGHT_SPECIAL_CHARS)
    return None


def _check_subdomains(url: str) -> Optional[Factor]:
    # counts every dot, path and query included
    if url.count('.') > DOT_LIMIT:
        return Factor("Multiple subdomains", "medium", WEIGHT_SUBDOMAINS)
    return None


def find_keywords(url: str) -> List[str]:
    """Return matched suspicious keywords in declaration order."""
    lowered = url.lower()
    return [kw for kw in SUSPICIOUS_KEYWORDS if kw in lowered]


def _check_keywords(url: str) -> Optional[Factor]:
    found = find_keywords(url)
    if found:
        return Factor(f"Suspicious keywords: {', '.join(found)}", "medium", WEIGHT_KEYWORDS)
    return None


def _check_shortener(url: str) -> Optional[Factor]:
    if any(s in url for s in SHORTENERS):
        return Factor("URL shortener detected", "medium", WEIGHT_SHORTENER)
    return None


def _check_homograph(url: str) -> Optional[Factor]:
    if CYRILLIC_RE.search(url):
        return Factor("Potential homograph attack", "high", WEIGHT_HOMOGRAPH)
    return None


# Evaluation order is part of the output contract.
DETECTORS: Tuple[Callable[[str], Optional[Factor]], ...] = (
    _check_length,
    _check_https,
    _check_ip_address,
    _check_special_chars,
    _check_subdomains,
    _check_keywords,
    _check_shortener,
    _check_homograph,
)


def classify(score: int) -> Tuple[str, str, str]:
    """Map a risk score to (status, message, tier)."""
    if score >= HIGH_RISK_SCORE:
        return ("High Risk",
                "This URL shows strong indicators of phishing. Avoid clicking!",
                "red")
    if score >= MEDIUM_RISK_SCORE:
        return ("Medium Risk",
                "This URL has some suspicious characteristics. Proceed with caution.",
                "yellow")
    return ("Low Risk",
            "This URL appears relatively safe, but always stay vigilant.",
            "green")


def analyze(url: str) -> Verdict:
    """
    Run every detector against the raw ``url`` and build a Verdict.

    The score is the plain sum of triggered factor points and is not
    clamped to 100; callers showing it as a percentage clamp for display.
    """
    factors = []
    for detector in DETECTORS:
        factor = detector(url)
        if factor is not None:
            factors.append(factor)

    score = sum(f.points for f in factors)
    status, message, tier = classify(score)
    return Verdict(
        status=status,
        message=message,
        tier=tier,
        risk_score=score,
        factors=tuple(factors),
    )


# Simple CLI / quick tests
if __name__ == "__main__":
    test_urls = [
        "https://www.google.com",
        "http://accounts-verification-security-update.com/login",
        "https://192.168.1.1/admin/login.php",
        "https://paypal.security.verify-account-now.tk/signin",
    ]

    for u in test_urls:
        res = analyze(u)
        print("=" * 80)
        print("URL:", u)
        print("Score:", res.risk_score, "Verdict:", res.status, f"({res.tier})")
        for f in res.factors:
            print(f"- {f.name}: {f.risk} (+{f.points})")
        print()
