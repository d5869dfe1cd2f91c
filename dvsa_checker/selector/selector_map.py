"""Typed selector lookup table for the booking site."""

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Final, Mapping

from ..core.exceptions import SelectorMapError

CENTRE_ID_PLACEHOLDER: Final[str] = "{centre_id}"
_LEGACY_PLACEHOLDER: Final[str] = "{centreId}"


class SelectorStep(str, Enum):
    """Closed set of logical page elements the checker interacts with."""

    # Login
    LICENCE_NUMBER_INPUT = "licence_number_input"
    BOOKING_REFERENCE_INPUT = "booking_reference_input"
    CONTINUE_BUTTON = "continue_button"
    ERROR_SUMMARY = "error_summary"
    CAPTCHA_IFRAME = "captcha_iframe"
    CAPTCHA_CHALLENGE = "captcha_challenge"
    CAPTCHA_RESPONSE_FIELD = "captcha_response_field"
    CHANGE_TEST_DATE_LINK = "change_test_date_link"

    # Centre selection
    TEST_CENTRE_INPUT = "test_centre_input"
    FIND_CENTRE_BUTTON = "find_centre_button"
    CONTINUE_TO_CALENDAR_BUTTON = "continue_to_calendar_button"

    # Calendar
    CALENDAR_MONTH_YEAR_HEADER = "calendar_month_year_header"
    CALENDAR_NEXT_MONTH_BUTTON = "calendar_next_month_button"
    AVAILABLE_DATE_ANCHOR = "available_date_anchor"

    # Booking
    FIRST_AVAILABLE_SLOT_RADIO = "first_available_slot_radio"
    CONFIRM_SLOT_BUTTON = "confirm_slot_button"
    FINAL_CONFIRMATION_CHECKBOX = "final_confirmation_checkbox"
    CONFIRM_CHANGE_BUTTON = "confirm_change_button"


# The one entry that needs a centre id substituted at use time.
CENTRE_RADIO_TEMPLATE_KEY: Final[str] = "select_centre_radio_pattern"

# Names used by older remote configs for the same step.
_KEY_ALIASES: Final[Dict[str, SelectorStep]] = {
    "error_summary_selector": SelectorStep.ERROR_SUMMARY,
}

# Older remote configs carry no entry for the token field; the widget always uses this id.
DEFAULT_CAPTCHA_RESPONSE_FIELD: Final[str] = "#g-recaptcha-response"


def _normalize_key(key: str) -> str:
    return str(key).strip().lower()


class SelectorMap:
    """
    Immutable mapping of SelectorStep -> locator plus the centre radio template.

    Construction validates completeness: every SelectorStep must be present
    and the template must contain the ``{centre_id}`` placeholder.
    """

    __slots__ = ("_selectors", "_centre_radio_template")

    def __init__(self, selectors: Mapping[SelectorStep, str], centre_radio_template: str):
        missing = [step.value for step in SelectorStep if not selectors.get(step)]
        if missing:
            raise SelectorMapError("Selector map is incomplete.", missing_steps=missing)

        template = (centre_radio_template or "").replace(_LEGACY_PLACEHOLDER, CENTRE_ID_PLACEHOLDER)
        if CENTRE_ID_PLACEHOLDER not in template:
            raise SelectorMapError(
                f"Centre radio template must contain {CENTRE_ID_PLACEHOLDER}: {template!r}"
            )

        self._selectors: Mapping[SelectorStep, str] = MappingProxyType(
            {step: str(selectors[step]) for step in SelectorStep}
        )
        self._centre_radio_template = template

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SelectorMap":
        """
        Build from a YAML/JSON mapping.

        Keys are matched case-insensitively, so the upper-case names used by
        older remote configs (``LICENCE_NUMBER_INPUT``) load as well, and so do
        their aliases (``ERROR_SUMMARY_SELECTOR``). A missing captcha response
        field defaults to ``#g-recaptcha-response``. Unknown keys are ignored.

        Raises:
            SelectorMapError: If a step or the template is missing
        """
        if not isinstance(data, Mapping):
            raise SelectorMapError("Selector map must be a mapping")

        normalized = {_normalize_key(k): v for k, v in data.items()}
        for alias, step in _KEY_ALIASES.items():
            if alias in normalized:
                normalized.setdefault(step.value, normalized[alias])
        normalized.setdefault(
            SelectorStep.CAPTCHA_RESPONSE_FIELD.value, DEFAULT_CAPTCHA_RESPONSE_FIELD
        )

        selectors: Dict[SelectorStep, str] = {}
        for step in SelectorStep:
            value = normalized.get(step.value)
            if isinstance(value, str) and value.strip():
                selectors[step] = value.strip()

        template = normalized.get(CENTRE_RADIO_TEMPLATE_KEY)
        if not isinstance(template, str):
            raise SelectorMapError(
                "Selector map is incomplete.", missing_steps=[CENTRE_RADIO_TEMPLATE_KEY]
            )
        return cls(selectors, template)

    def __getitem__(self, step: SelectorStep) -> str:
        return self._selectors[step]

    def centre_radio(self, centre_id: str) -> str:
        """Locator for a centre's radio button on the search results page."""
        return self._centre_radio_template.replace(CENTRE_ID_PLACEHOLDER, str(centre_id))

    @property
    def centre_radio_template(self) -> str:
        return self._centre_radio_template

    def to_dict(self) -> Dict[str, str]:
        data = {step.value: locator for step, locator in self._selectors.items()}
        data[CENTRE_RADIO_TEMPLATE_KEY] = self._centre_radio_template
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectorMap):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.to_dict().items())))

    def __repr__(self) -> str:
        return f"SelectorMap({len(self._selectors)} steps)"
