from dataclasses import dataclass

import phonenumbers

from core.common.exceptions import UnprocessableEntity


@dataclass(frozen=True)
class NormalizedPhone:
    raw: str
    e164: str
    country: str
    valid: bool = True


def _format_e164(pn) -> str:
    return phonenumbers.format_number(pn, phonenumbers.PhoneNumberFormat.E164)


def normalize_from_country_and_national(country: str, national: str) -> NormalizedPhone:
    """
    Parse a national number using the ISO-3166 alpha-2 country as region hint.
    Raises 422 if the pair is not a valid number for that country.
    """
    iso2 = (country or "").strip().upper()
    try:
        pn = phonenumbers.parse(national or "", iso2)
    except phonenumbers.NumberParseException:
        pn = None

    if pn is None or not phonenumbers.is_valid_number(pn):
        raise UnprocessableEntity("Invalid phone number for the given country", code="INVALID_PHONE")

    return NormalizedPhone(raw=national, e164=_format_e164(pn), country=iso2)


def normalize_from_international(number: str) -> NormalizedPhone:
    """
    Parse a full international number (leading '+').
    The region is derived from the number itself; 422 if it can't be.
    """
    try:
        pn = phonenumbers.parse(number or "", None)
    except phonenumbers.NumberParseException:
        pn = None

    region = phonenumbers.region_code_for_number(pn) if pn is not None else None
    if pn is None or not phonenumbers.is_valid_number(pn) or not region or region == "001":
        raise UnprocessableEntity("Invalid international phone number", code="INVALID_PHONE")

    return NormalizedPhone(raw=number, e164=_format_e164(pn), country=region)
