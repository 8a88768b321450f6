import re
from typing import Dict

from crm.draft import CustomerDraft, DraftField, EditorMode
from crm.models import Gender

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# digits are ASCII only, as in the browser form
PHONE_DIGITS_RE = re.compile(r"^\d{10,15}$", re.ASCII)
STREET_NUMBER_RE = re.compile(r"^\d{1,9}$", re.ASCII)
NON_DIGIT_RE = re.compile(r"\D", re.ASCII)

GENDERS = {g.value for g in Gender}


def validate_draft(draft: CustomerDraft, mode: EditorMode) -> Dict[str, str]:
    """
    Check a draft before it is submitted.
    Returns field name -> message; an empty dict means the draft is valid.
    """
    errors: Dict[str, str] = {}

    if not draft.first_name.strip():
        errors[DraftField.FIRST_NAME.value] = "First name is required"

    if not draft.last_name.strip():
        errors[DraftField.LAST_NAME.value] = "Last name is required"

    if not draft.email.strip():
        errors[DraftField.EMAIL.value] = "Email is required"
    elif not EMAIL_RE.fullmatch(draft.email):
        errors[DraftField.EMAIL.value] = "Please enter a valid email address"

    # usernames are fixed once the customer exists
    if mode is EditorMode.CREATE and not draft.username.strip():
        errors[DraftField.USERNAME.value] = "Username is required"

    if draft.phone and not PHONE_DIGITS_RE.fullmatch(NON_DIGIT_RE.sub("", draft.phone)):
        errors[DraftField.PHONE.value] = "Please enter a valid phone number"

    if draft.street_number and not STREET_NUMBER_RE.fullmatch(draft.street_number):
        errors[DraftField.STREET_NUMBER.value] = "Street number must be a number"

    if draft.gender not in GENDERS:
        errors[DraftField.GENDER.value] = "Please choose a gender"

    return errors
