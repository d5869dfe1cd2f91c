"""Bundled fallback site configuration, used when no newer map is available."""

from typing import Any, Dict

from .site_config import SiteConfig

FALLBACK_SITE_CONFIG: Dict[str, Any] = {
    "version": 1,
    "urls": {
        "login_url": "https://driverpracticaltest.dvsa.gov.uk/login",
        "logged_in_url": "https://driverpracticaltest.dvsa.gov.uk/manage",
        "public_url": "https://www.gov.uk/change-driving-test",
    },
    "selectors": {
        "licence_number_input": "#driving-licence-number",
        "booking_reference_input": "#application-reference-number",
        "continue_button": "#booking-login",
        "error_summary": ".error-summary",
        "captcha_iframe": 'iframe[src*="recaptcha"]',
        "captcha_challenge": ".g-recaptcha[data-sitekey]",
        "captcha_response_field": "#g-recaptcha-response",
        "change_test_date_link": 'a[href*="/manage-booking/choose-time"], #date-time-change',
        "test_centre_input": "#test-centres-input",
        "find_centre_button": "#test-centres-submit",
        "select_centre_radio_pattern": 'input[name="test-centre"][value="{centre_id}"]',
        "continue_to_calendar_button": "#test-centre-submit",
        "calendar_month_year_header": ".BookingCalendar-currentMonth",
        "calendar_next_month_button": "a.BookingCalendar-nav--next",
        "available_date_anchor": "td.BookingCalendar-date--bookable > a",
        "first_available_slot_radio": 'input[name="slot"][type="radio"]',
        "confirm_slot_button": "#slot-submit",
        "final_confirmation_checkbox": "#change-confirmation",
        "confirm_change_button": "#booking-change-submit",
    },
}


def fallback_site_config() -> SiteConfig:
    return SiteConfig.from_dict(FALLBACK_SITE_CONFIG)
