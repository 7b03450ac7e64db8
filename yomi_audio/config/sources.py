"""Built-in pronunciation provider table.

Used when ``config/providers.yaml`` is absent.  Order matters: it is the
default source ordering for requests that do not include any provider
explicitly.
"""

from __future__ import annotations

_GITHUB_RAW = "https://raw.githubusercontent.com/wapanese"

# (key, display name, origin)
DEFAULT_PROVIDERS: tuple[tuple[str, str, str], ...] = (
    ("nhk16", "NHK16", f"{_GITHUB_RAW}/jp_nhk16_pronunciations_tmw/main"),
    ("shinmeikai8", "SMK8", f"{_GITHUB_RAW}/jp_shinmeikai8_pronunciations_tmw/main"),
    ("jpod", "JPod101", f"{_GITHUB_RAW}/jp_jpod_pronunciations_tmw/main"),
    ("forvo", "Forvo", f"{_GITHUB_RAW}/jp_forvo_pronunciations_tmw/main"),
    ("forvo22", "Forvo22", f"{_GITHUB_RAW}/jp_forvo_pronunciations_2022/main"),
    ("forvo25", "Forvo25", f"{_GITHUB_RAW}/jp_forvo_pronunciations_2025/main"),
    ("daijisen", "Daijisen", f"{_GITHUB_RAW}/daijisen_pronunciations_index/main"),
    ("oubunsha_kogo", "Oubunsha-Kogo", f"{_GITHUB_RAW}/oubunsha_kogo_pronunciations_index/main"),
    ("taas", "TAAS", f"{_GITHUB_RAW}/taas_pronunciations_index/main"),
)
