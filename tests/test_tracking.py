import re

from freight_booking.application.package_service import generate_tracking_number, TRACKING_PREFIX


def test_tracking_number_format():
    code = generate_tracking_number()
    assert code.startswith(TRACKING_PREFIX)
    assert re.fullmatch(r"COL\d{13}[A-Z0-9]{9}", code)


def test_tracking_numbers_are_unique():
    codes = [generate_tracking_number() for _ in range(10_000)]
    assert len(set(codes)) == len(codes)


def test_tracking_number_time_component_does_not_decrease():
    first = int(generate_tracking_number()[3:16])
    second = int(generate_tracking_number()[3:16])
    assert second >= first
