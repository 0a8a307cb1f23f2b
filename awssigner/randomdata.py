"""
Random test data for template variables.
"""

from datetime import date, datetime
import random

from faker import Faker

_faker = Faker()

def random_number(length=6):
    """
    random_number(length=6) -> int

    A random integer with exactly length decimal digits.
    """
    if length < 1:
        raise ValueError("length must be at least 1")

    return random.randint(10 ** (length - 1), 10 ** length - 1)

def random_date(start_year=2000, end_year=2025):
    """
    random_date(start_year=2000, end_year=2025) -> str

    A random date between Jan 1 of start_year and Dec 31 of end_year, as
    YYYY-MM-DD.
    """
    start = date(start_year, 1, 1)
    end = date(end_year, 12, 31)
    if end < start:
        raise ValueError("end_year must not be before start_year")

    return _faker.date_between_dates(
        date_start=start, date_end=end).isoformat()

def random_email():
    """
    random_email() -> str

    A random, plausible-looking e-mail address.
    """
    return _faker.email()

def random_uuid():
    """
    random_uuid() -> str

    A random version 4 UUID in canonical hyphenated form.
    """
    return _faker.uuid4()

def random_word():
    """
    random_word() -> str

    A single random lorem-ipsum word.
    """
    return _faker.word()

def random_text(word_count=10):
    """
    random_text(word_count=10) -> str

    word_count lorem-ipsum words separated by spaces.
    """
    return " ".join(_faker.words(nb=word_count))

def unique_email(now=None):
    """
    unique_email(now=None) -> str

    A random address made unique by a day/minute/second/millisecond tag,
    e.g. jsmith.071542123@example.org.
    """
    if now is None:
        now = datetime.now()

    tag = "%02d%02d%02d%03d" % (
        now.day, now.minute, now.second, now.microsecond // 1000)
    return "%s.%s@%s" % (_faker.user_name(), tag, _faker.domain_name())

def generate_randoms(variables):
    """
    Fill variables with a fresh randomWord, randomUuid, randomEmail,
    uniqueEmail, and randomText.
    """
    variables["randomWord"] = random_word()
    variables["randomUuid"] = random_uuid()
    variables["randomEmail"] = random_email()
    variables["uniqueEmail"] = unique_email()
    variables["randomText"] = random_text()
    return variables
