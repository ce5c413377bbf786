from datetime import date, timedelta

# Constants
DONATION_COOLDOWN_DAYS = 90


def next_eligible_date(last_donation_date):
    """Date from which a donor may give blood again, or None if never donated"""
    if not last_donation_date:
        return None
    return last_donation_date + timedelta(days=DONATION_COOLDOWN_DAYS)


def can_donate(donor, today=None) -> bool:
    """
    Check if a donor may book a donation.

    Criteria:
    - Donor is not flagged ineligible
    - Donor hasn't donated in the last 90 days

    Args:
        donor (DonorProfile): Donor object
        today (date): Reference date, defaults to today

    Returns:
        bool: True if eligible, False otherwise
    """
    if not donor.is_eligible:
        return False

    eligible_from = next_eligible_date(donor.last_donation_date)
    if eligible_from is None:
        return True
    return (today or date.today()) >= eligible_from


def days_until_eligible(donor, today=None) -> int:
    """Days left in the cooldown window, never negative"""
    eligible_from = next_eligible_date(donor.last_donation_date)
    if eligible_from is None:
        return 0
    return max(0, (eligible_from - (today or date.today())).days)
