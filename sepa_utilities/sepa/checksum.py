"""
ISO/IEC 7064 MOD 97-10 Checksum

Used by IBAN and SEPA creditor identifier validation. The digit string is
reduced one position at a time against a table of 10^i mod 97, so long
account numbers never become big integers.
"""

import string

MOD_97_VALUES = (
    1, 10, 3, 30, 9, 90, 27, 76, 81, 34, 49, 5, 50, 15, 53, 45, 62, 38,
    89, 17, 73, 51, 25, 56, 75, 71, 31, 19, 93, 57, 85, 74, 61, 28, 86,
    84, 64, 58, 95, 77, 91, 37, 79, 14, 43, 42, 32, 29, 96, 87, 94, 67,
    88, 7, 70, 21, 16, 63, 48, 92, 47, 82, 44, 52, 35, 59, 8, 80, 24,
)

# A=10 ... Z=35
LETTER_VALUES = str.maketrans({
    letter: str(value) for value, letter in enumerate(string.ascii_uppercase, start=10)
})


def letters_to_digits(value: str) -> str:
    """Replace every upper case letter by its two digit value."""
    return value.translate(LETTER_VALUES)


def iso7064_mod97_10(digits: str) -> int:
    """
    Calculate the MOD 97-10 remainder of a digit string.

    Position 0 is the last digit; each digit is weighted with 10^i mod 97.
    """
    checksum = 0
    for position, char in enumerate(reversed(digits)):
        if position < len(MOD_97_VALUES):
            weight = MOD_97_VALUES[position]
        else:
            weight = pow(10, position, 97)
        checksum = (checksum + weight * int(char)) % 97
    return checksum


def checksum_is_valid(digits: str) -> bool:
    """Verify a rearranged, letter-free digit string."""
    if not digits or not digits.isdigit() or not digits.isascii():
        return False
    return iso7064_mod97_10(digits) == 1
