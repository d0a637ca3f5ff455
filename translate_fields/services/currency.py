"""
Currency conversion for the openAI backend.

The model only locates currency amounts; everything numeric happens
here: the FX rate lookup, the conversion directive written into the
prompt, and the fixed formatter that turns located amounts into
destination-currency strings.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import date

import httpx

from translate_fields.config import get_settings
from translate_fields.core.errors import ConfigurationError, EvaluationError, RemoteServiceError
from translate_fields.core.models import Currency, TranslationOptions, default_currencies
from translate_fields.core.utils import utc_today

logger = logging.getLogger(__name__)


# Placeholder the model writes in place of each amount: {{amount:0}}
AMOUNT_REFERENCE = re.compile(r"\{\{amount:(\d+)\}\}")

# (thousands separator, decimal point)
DEFAULT_CONVENTION: tuple[str, str] = (",", ".")

NUMBER_CONVENTIONS: dict[str, tuple[str, str]] = {
    "de-ch": ("’", "."),
    "fr-ch": ("’", "."),
    "it-ch": ("’", "."),
    "de": (".", ","),
    "es": (".", ","),
    "it": (".", ","),
    "nl": (".", ","),
    "pt": (".", ","),
    "da": (".", ","),
    "el": (".", ","),
    "id": (".", ","),
    "ro": (".", ","),
    "hr": (".", ","),
    "sl": (".", ","),
    "sr": (".", ","),
    "tr": (".", ","),
    "vi": (".", ","),
    "fr": ("\u202f", ","),
    "nb": ("\u00a0", ","),
    "no": ("\u00a0", ","),
    "sv": ("\u00a0", ","),
    "fi": ("\u00a0", ","),
    "cs": ("\u00a0", ","),
    "sk": ("\u00a0", ","),
    "pl": ("\u00a0", ","),
    "ru": ("\u00a0", ","),
    "uk": ("\u00a0", ","),
    "bg": ("\u00a0", ","),
    "hu": ("\u00a0", ","),
    "lt": ("\u00a0", ","),
    "lv": ("\u00a0", ","),
    "et": ("\u00a0", ","),
}


# =============================================================================
# Number formatting
# =============================================================================


def number_convention(locale: str) -> tuple[str, str]:
    """Thousands separator and decimal point used by a locale."""
    normalized = locale.replace("_", "-").lower()
    if normalized in NUMBER_CONVENTIONS:
        return NUMBER_CONVENTIONS[normalized]
    return NUMBER_CONVENTIONS.get(normalized.split("-")[0], DEFAULT_CONVENTION)


def round_amount(value: float) -> float:
    """
    Floor a converted amount to its tier.

    Nearest lower multiple of 50 up to 100, of 100 above 100 and of 1000
    above 1000.
    """
    if value > 1000:
        step = 1000
    elif value > 100:
        step = 100
    else:
        step = 50
    return math.floor(value / step) * step


def format_number(value: float, locale: str) -> str:
    """Render a number with the grouping and decimal point of a locale."""
    group, decimal = number_convention(locale)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.2f}".partition(".")
    grouped = f"{int(whole):,}".replace(",", group)
    if fraction == "00":
        return f"{sign}{grouped}"
    return f"{sign}{grouped}{decimal}{fraction}"


# =============================================================================
# Conversion
# =============================================================================


@dataclass
class CurrencyConversion:
    """Resolved currencies and rate for one source → destination call."""

    source: Currency
    destination: Currency
    rate: float
    requested: bool
    from_locale: str
    to_locale: str

    @property
    def active(self) -> bool:
        """Amounts are converted only when asked for and the rate moves them."""
        return self.requested and self.rate != 1

    def directive(self) -> str:
        """Instruction telling the model how to treat currency amounts."""
        return build_conversion_directive(
            self.source, self.destination, self.rate, self.requested, self.to_locale
        )

    def render(self, amount: float) -> str:
        """Final text of one located amount."""
        if self.active:
            converted = round_amount(amount * self.rate)
            return self.destination.render(format_number(converted, self.to_locale))
        return self.source.render(format_number(amount, self.from_locale))

    def fill(self, text: str, amounts: list[float]) -> str:
        """Replace every {{amount:N}} in text with amounts[N] rendered."""
        def _replace(match: re.Match) -> str:
            index = int(match.group(1))
            if index >= len(amounts):
                raise EvaluationError(
                    f"Placeholder {match.group(0)} has no amount ({len(amounts)} given)"
                )
            return self.render(amounts[index])

        return AMOUNT_REFERENCE.sub(_replace, text)


def build_conversion_directive(
    source: Currency,
    destination: Currency,
    fx_rate: float,
    convert_currency: bool,
    to_locale: str = "",
) -> str:
    """
    Prompt fragment about currency amounts.

    Forbids any numeric change unless conversion was requested and the
    rate differs from 1; otherwise names both currencies, formats and
    the rate.
    """
    if not convert_currency or fx_rate == 1:
        return (
            "Do not convert any currency or change any number formatting: keep every "
            "number exactly as written, do not use amount placeholders and leave "
            "`amounts` empty."
        )

    locale = f" of the locale '{to_locale}'" if to_locale else ""
    return (
        "If the text includes a number with a currency, it is explicitly requested and "
        f"required to change all currencies from {source.code} with format {source.format} "
        f"to {destination.code} with format {destination.format}. The exchange rate "
        f"{source.code}:{destination.code} is {fx_rate}. Do not convert, round or format "
        "the amounts yourself: replace each currency amount, symbol included, with the "
        "placeholder {{amount:N}} in `text` and put its plain number in "
        f"{source.code} at index N of `amounts`. Each amount is then converted at that "
        "rate and floored to the nearest multiple of 50 if it is 100 or less, of 100 if "
        "it is above 100, or of 1000 if it is above 1000, and written with the thousands "
        f"separators and decimal point{locale}."
    )


def currency_for(options: TranslationOptions, locale: str) -> Currency:
    """Currency configured for a locale; euro for every locale when no table is set."""
    table = options.openai_options.currencies or default_currencies([locale])
    if locale not in table:
        raise ConfigurationError(f"No currency configured for locale '{locale}'")
    return table[locale]


def cross_rate(rates: dict[str, float], from_code: str, to_code: str) -> float:
    """Destination units per source unit, from a EUR-based rate table."""
    def _per_eur(code: str) -> float:
        key = code.lower()
        if key in rates:
            return float(rates[key])
        if key == "eur":
            return 1.0
        raise ConfigurationError(f"No exchange rate available for {code}")

    return _per_eur(to_code) / _per_eur(from_code)


class CurrencyConverter:
    """
    Looks up FX rates and resolves the conversion of one call.

    Rates come from a daily EUR snapshot; when the dated snapshot fails
    the "latest" variant is tried once with the date as a query
    parameter.
    """

    def __init__(self, client: httpx.AsyncClient | None = None):
        self._client = client

    async def fetch_rates(self, on: date | None = None) -> dict[str, float]:
        """EUR-based rate table: lower-case currency code -> units per euro."""
        day = (on or utc_today()).isoformat()
        settings = get_settings()

        if self._client is not None:
            return await self._fetch(self._client, settings, day)
        async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
            return await self._fetch(client, settings, day)

    async def _fetch(self, client: httpx.AsyncClient, settings, day: str) -> dict[str, float]:
        try:
            response = await client.get(settings.fx_rates_url.format(date=day))
            response.raise_for_status()
            return response.json()["eur"]
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.warning(f"FX snapshot for {day} unavailable ({e}), trying latest")

        try:
            response = await client.get(settings.fx_rates_fallback_url, params={"date": day})
            response.raise_for_status()
            return response.json()["eur"]
        except httpx.HTTPStatusError as e:
            raise RemoteServiceError(
                f"FX rates returned status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, KeyError, ValueError) as e:
            raise RemoteServiceError(f"FX rates unavailable: {e}") from e

    async def resolve(
        self,
        options: TranslationOptions,
        convert_currency: bool,
        on: date | None = None,
    ) -> CurrencyConversion:
        """Currencies and rate for options.from_locale -> options.to_locale."""
        source = currency_for(options, options.from_locale)
        destination = currency_for(options, options.to_locale)

        rate = 1.0
        if convert_currency and source.code != destination.code:
            rates = await self.fetch_rates(on)
            rate = cross_rate(rates, source.code, destination.code)
            logger.debug(f"FX {source.code}:{destination.code} = {rate}")

        return CurrencyConversion(
            source=source,
            destination=destination,
            rate=rate,
            requested=convert_currency,
            from_locale=options.from_locale,
            to_locale=options.to_locale,
        )
