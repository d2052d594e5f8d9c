"""Static prestige lookup table.

The table is a flat two-level chain: individual identities (family members
and explicit overrides) are checked first, then group identities mapped to
a ``PrestigeTier``. Family members inherit their group's tier score unless
an override names them. Keys are canonical owner identities; normalization
(casing, diacritics, alias folding) happens upstream.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType

from artisan_rank.prestige.schemas import (
    MAX_PRESTIGE_SCORE,
    MIN_PRESTIGE_SCORE,
    PrestigeTier,
)


@dataclass(frozen=True)
class PrestigeTierTable:
    """Immutable owner-identity to prestige-score lookup.

    Attributes:
        groups: Group identity (family, institution) -> tier.
        members: Individual identity -> group identity it inherits from.
        overrides: Identity -> explicit score, beating any inherited score.
        default_score: Score for identities found nowhere in the table.
    """

    groups: Mapping[str, PrestigeTier]
    members: Mapping[str, str] = field(default_factory=dict)
    overrides: Mapping[str, float] = field(default_factory=dict)
    default_score: float = MIN_PRESTIGE_SCORE
    _individual_scores: Mapping[str, float] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        unknown = sorted(g for g in self.members.values() if g not in self.groups)
        if unknown:
            raise ValueError(f"Members reference unknown groups: {unknown}")
        for identity, score in self.overrides.items():
            if not MIN_PRESTIGE_SCORE <= score <= MAX_PRESTIGE_SCORE:
                raise ValueError(
                    f"Override score for {identity!r} must be within "
                    f"[{MIN_PRESTIGE_SCORE}, {MAX_PRESTIGE_SCORE}], got {score}"
                )
        if not MIN_PRESTIGE_SCORE <= self.default_score <= MAX_PRESTIGE_SCORE:
            raise ValueError(f"default_score out of range: {self.default_score}")

        individual = {
            member: self.groups[group].score for member, group in self.members.items()
        }
        individual.update(self.overrides)

        # Freeze copies so callers cannot mutate the table after construction
        object.__setattr__(self, "groups", MappingProxyType(dict(self.groups)))
        object.__setattr__(self, "members", MappingProxyType(dict(self.members)))
        object.__setattr__(self, "overrides", MappingProxyType(dict(self.overrides)))
        object.__setattr__(self, "_individual_scores", MappingProxyType(individual))

    def individual_score(self, identity: str) -> float | None:
        """Score for an individual or overridden identity, if listed."""
        return self._individual_scores.get(identity)

    def group_tier(self, identity: str) -> PrestigeTier | None:
        """Tier for a group identity, if listed."""
        return self.groups.get(identity)

    def __len__(self) -> int:
        return len(self.groups.keys() | self._individual_scores.keys())


# ── Default table ────────────────────────────────────────

_DEFAULT_GROUPS: dict[str, PrestigeTier] = {
    # Imperial
    "Imperial Family": PrestigeTier.IMPERIAL,
    "Imperial Household": PrestigeTier.IMPERIAL,
    # Shogunal houses
    "Tokugawa Family": PrestigeTier.SHOGUNAL,
    "Tokugawa Shogun Family": PrestigeTier.SHOGUNAL,
    "Ashikaga Family": PrestigeTier.SHOGUNAL,
    "Toyotomi Family": PrestigeTier.SHOGUNAL,
    # Premier daimyo: 500K+ koku or Gosanke/Gosankyo standing
    "Maeda Family": PrestigeTier.PREMIER_DAIMYO,
    "Shimazu Family": PrestigeTier.PREMIER_DAIMYO,
    "Echizen Matsudaira Family": PrestigeTier.PREMIER_DAIMYO,
    "Date Family": PrestigeTier.PREMIER_DAIMYO,
    "Owari Tokugawa Family": PrestigeTier.PREMIER_DAIMYO,
    "Kishu Tokugawa Family": PrestigeTier.PREMIER_DAIMYO,
    "Hosokawa Family": PrestigeTier.PREMIER_DAIMYO,
    "Mito Tokugawa Family": PrestigeTier.PREMIER_DAIMYO,
    "Tayasu Tokugawa Family": PrestigeTier.PREMIER_DAIMYO,
    "Hitotsubashi Tokugawa Family": PrestigeTier.PREMIER_DAIMYO,
    # Major daimyo: 200K-499K koku
    "Kuroda Family": PrestigeTier.MAJOR_DAIMYO,
    "Asano Family": PrestigeTier.MAJOR_DAIMYO,
    "Mori Family": PrestigeTier.MAJOR_DAIMYO,
    "Nabeshima Family": PrestigeTier.MAJOR_DAIMYO,
    "Ii Family": PrestigeTier.MAJOR_DAIMYO,
    "Ikeda Family": PrestigeTier.MAJOR_DAIMYO,
    "Hachisuka Family": PrestigeTier.MAJOR_DAIMYO,
    "Yamauchi Family": PrestigeTier.MAJOR_DAIMYO,
    "Aizu Matsudaira Family": PrestigeTier.MAJOR_DAIMYO,
    "Uesugi Family": PrestigeTier.MAJOR_DAIMYO,
    "Satake Family": PrestigeTier.MAJOR_DAIMYO,
    "Todo Family": PrestigeTier.MAJOR_DAIMYO,
    "Oda Family": PrestigeTier.MAJOR_DAIMYO,
    # Other daimyo and court houses
    "Sakai Family": PrestigeTier.OTHER_DAIMYO,
    "Ogasawara Family": PrestigeTier.OTHER_DAIMYO,
    "Matsudaira Family": PrestigeTier.OTHER_DAIMYO,
    "Arima Family": PrestigeTier.OTHER_DAIMYO,
    "Matsue Matsudaira Family": PrestigeTier.OTHER_DAIMYO,
    "Saijo Matsudaira Family": PrestigeTier.OTHER_DAIMYO,
    "Takasu Matsudaira Family": PrestigeTier.OTHER_DAIMYO,
    "Hisamatsu Matsudaira Family": PrestigeTier.OTHER_DAIMYO,
    "Honda Family": PrestigeTier.OTHER_DAIMYO,
    "Inaba Family": PrestigeTier.OTHER_DAIMYO,
    "Makino Family": PrestigeTier.OTHER_DAIMYO,
    "Yanagisawa Family": PrestigeTier.OTHER_DAIMYO,
    "Naito Family": PrestigeTier.OTHER_DAIMYO,
    "Okudaira Family": PrestigeTier.OTHER_DAIMYO,
    "Okubo Family": PrestigeTier.OTHER_DAIMYO,
    "Tsuchiya Family": PrestigeTier.OTHER_DAIMYO,
    "Mizuno Family": PrestigeTier.OTHER_DAIMYO,
    "Naruse Family": PrestigeTier.OTHER_DAIMYO,
    "Tachibana Family": PrestigeTier.OTHER_DAIMYO,
    "Nanbu Family": PrestigeTier.OTHER_DAIMYO,
    "Tsugaru Family": PrestigeTier.OTHER_DAIMYO,
    "Sanada Family": PrestigeTier.OTHER_DAIMYO,
    "Hojo Family": PrestigeTier.OTHER_DAIMYO,
    "Kyogoku Family": PrestigeTier.OTHER_DAIMYO,
    "Akimoto Family": PrestigeTier.OTHER_DAIMYO,
    "Kamei Family": PrestigeTier.OTHER_DAIMYO,
    "Takeda Family": PrestigeTier.OTHER_DAIMYO,
    "Konoe Family": PrestigeTier.OTHER_DAIMYO,
    # Merchant and industrial houses
    "Iwasaki Family": PrestigeTier.ZAIBATSU,
    "Mitsui Family": PrestigeTier.ZAIBATSU,
    "Konoike Family": PrestigeTier.ZAIBATSU,
    "Sumitomo Family": PrestigeTier.ZAIBATSU,
    "Yasuda Family": PrestigeTier.ZAIBATSU,
    # Institutions and shrines
    "Seikado Bunko": PrestigeTier.INSTITUTION,
    "Eisei Bunko": PrestigeTier.INSTITUTION,
    "Nezu Museum": PrestigeTier.INSTITUTION,
    "Sano Art Museum": PrestigeTier.INSTITUTION,
    "Kurokawa Institute": PrestigeTier.INSTITUTION,
    "Tokugawa Reimeikai Foundation": PrestigeTier.INSTITUTION,
    "Tokyo National Museum": PrestigeTier.INSTITUTION,
    "Kasuga Taisha": PrestigeTier.INSTITUTION,
    "Atsuta Shrine": PrestigeTier.INSTITUTION,
    "Tanzan Shrine": PrestigeTier.INSTITUTION,
    "Yasukuni Shrine": PrestigeTier.INSTITUTION,
}

_DEFAULT_MEMBERS: dict[str, str] = {
    "Emperor Meiji": "Imperial Family",
    "Emperor Go-Toba": "Imperial Family",
    "Tokugawa Ieyasu": "Tokugawa Shogun Family",
    "Tokugawa Hidetada": "Tokugawa Shogun Family",
    "Tokugawa Iemitsu": "Tokugawa Shogun Family",
    "Tokugawa Tsunayoshi": "Tokugawa Shogun Family",
    "Tokugawa Yoshimune": "Tokugawa Shogun Family",
    "Ashikaga Yoshimitsu": "Ashikaga Family",
    "Ashikaga Yoshimasa": "Ashikaga Family",
    "Toyotomi Hideyoshi": "Toyotomi Family",
    "Toyotomi Hideyori": "Toyotomi Family",
    "Maeda Toshiie": "Maeda Family",
    "Maeda Tsunanori": "Maeda Family",
    "Date Masamune": "Date Family",
    "Hosokawa Tadaoki": "Hosokawa Family",
    "Hosokawa Moritatsu": "Hosokawa Family",
    "Shimazu Yoshihisa": "Shimazu Family",
    "Kuroda Nagamasa": "Kuroda Family",
    "Ii Naosuke": "Ii Family",
    "Uesugi Kenshin": "Uesugi Family",
    "Oda Nobunaga": "Oda Family",
    "Takeda Shingen": "Takeda Family",
    "Iwasaki Yanosuke": "Iwasaki Family",
}

# Individuals whose personal standing exceeds their house's tier
_DEFAULT_OVERRIDES: dict[str, float] = {
    "Oda Nobunaga": 9.0,
    "Takeda Shingen": 6.0,
    "Uesugi Kenshin": 8.0,
}


@lru_cache(maxsize=1)
def default_prestige_table() -> PrestigeTierTable:
    """Build the built-in prestige table (constructed once per process)."""
    return PrestigeTierTable(
        groups=_DEFAULT_GROUPS,
        members=_DEFAULT_MEMBERS,
        overrides=_DEFAULT_OVERRIDES,
    )
