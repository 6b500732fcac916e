"""
SEPA Constants for pain.001 / pain.008 Field Validation

This module contains all constant values used when validating SEPA payment
file fields, including schema versions, code lists, text limits, validation
patterns and the static country tables.

Reference: EPC SEPA Credit Transfer / Direct Debit Implementation Guidelines
"""

import re
from enum import Enum, IntEnum
from typing import Optional

# =============================================================================
# Schema Versions
# =============================================================================


class TransactionType(IntEnum):
    """SEPA transaction family, the leading digit of a SchemaVersion."""
    CREDIT_TRANSFER = 1
    DIRECT_DEBIT = 8


class SchemaVersion(IntEnum):
    """
    Supported pain.xxx message variants.

    The numeric ids are stable and start with the TransactionType digit.
    Country and clearing variants of a message share the same message type.
    """
    # Credit transfers
    PAIN_001_002_03 = 100203
    PAIN_001_003_03 = 100303
    PAIN_001_001_03 = 100103
    PAIN_001_001_03_GBIC = 1001031
    PAIN_001_001_03_CH_02 = 1001032
    # Direct debits
    PAIN_008_002_02 = 800202
    PAIN_008_003_02 = 800302
    PAIN_008_001_02 = 800102
    PAIN_008_001_02_GBIC = 8001021
    PAIN_008_001_02_AUSTRIAN_003 = 8001022
    PAIN_008_001_02_CH_03 = 8001023

    @property
    def message_type(self) -> str:
        return MESSAGE_TYPES[self]

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType(int(str(self.value)[0]))

    @classmethod
    def parse(cls, value) -> Optional["SchemaVersion"]:
        """Resolve an id, member name or member; unknown values give None."""
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return None
        if isinstance(value, str):
            key = value.strip().upper().replace(".", "_")
            if key.isdigit():
                return cls.parse(int(key))
            return cls.__members__.get(key)
        return None


MESSAGE_TYPES = {
    SchemaVersion.PAIN_001_001_03: "pain.001.001.03",
    SchemaVersion.PAIN_001_001_03_GBIC: "pain.001.001.03",
    SchemaVersion.PAIN_001_001_03_CH_02: "pain.001.001.03",
    SchemaVersion.PAIN_001_002_03: "pain.001.002.03",
    SchemaVersion.PAIN_001_003_03: "pain.001.003.03",
    SchemaVersion.PAIN_008_001_02: "pain.008.001.02",
    SchemaVersion.PAIN_008_001_02_GBIC: "pain.008.001.02",
    SchemaVersion.PAIN_008_001_02_AUSTRIAN_003: "pain.008.001.02",
    SchemaVersion.PAIN_008_001_02_CH_03: "pain.008.001.02",
    SchemaVersion.PAIN_008_002_02: "pain.008.002.02",
    SchemaVersion.PAIN_008_003_02: "pain.008.003.02",
}

# Until 2016-01-31 (incl.) the BIC was required for international payments
BIC_REQUIRED_THRESHOLD = 20160131

# =============================================================================
# Scheme Codes
# =============================================================================


class SequenceType(str, Enum):
    """Direct debit sequence types (SeqTp)."""
    FIRST = "FRST"
    RECURRING = "RCUR"
    ONCE = "OOFF"
    FINAL = "FNAL"


class LocalInstrument(str, Enum):
    """Direct debit scheme selector (LclInstrm/Cd)."""
    CORE = "CORE"
    CORE_D_1 = "COR1"       # urgent direct debit
    BUSINESS_2_BUSINESS = "B2B"
    LSV = "LSV+"            # Swiss LSV+


SEQUENCE_TYPES = frozenset(code.value for code in SequenceType)

LOCAL_INSTRUMENTS_BY_VERSION = {
    SchemaVersion.PAIN_008_001_02: frozenset({"CORE", "B2B"}),
    SchemaVersion.PAIN_008_001_02_GBIC: frozenset({"CORE", "B2B"}),
    SchemaVersion.PAIN_008_001_02_AUSTRIAN_003: frozenset({"CORE", "B2B"}),
    SchemaVersion.PAIN_008_002_02: frozenset({"CORE", "B2B"}),
    SchemaVersion.PAIN_008_003_02: frozenset({"CORE", "COR1", "B2B"}),
    SchemaVersion.PAIN_008_001_02_CH_03: frozenset({"LSV+"}),
}

# Mandate ids may contain whitespace since the 2016 scheme change, but only here
MANDATE_ID_WHITESPACE_VERSIONS = frozenset({
    SchemaVersion.PAIN_008_001_02,
    SchemaVersion.PAIN_008_001_02_GBIC,
})

# ISO 20022 ExternalCategoryPurpose1Code
CATEGORY_PURPOSE_CODES = frozenset({
    "BONU", "CASH", "CBLK", "CCRD", "CORT", "DCRD", "DIVI", "EPAY",
    "FCOL", "GOVT", "HEDG", "ICCP", "IDCP", "INTC", "INTE", "LOAN",
    "OTHR", "PENS", "SALA", "SECU", "SSBE", "SUPP", "TAXS", "TRAD",
    "TREA", "VATX", "WHLD",
})

# ISO 20022 ExternalPurpose1Code
PURPOSE_CODES = frozenset({
    "CBLK", "CDCB", "CDCD", "CDCS", "CDDP", "CDOC", "CDQC", "ETUP",
    "FCOL", "MTUP", "ACCT", "CASH", "COLL", "CSDB", "DEPT", "INTC",
    "LIMA", "NETT", "AGRT", "AREN", "BEXP", "BOCE", "COMC", "CPYR",
    "GDDS", "GDSV", "GSCB", "LICF", "POPE", "ROYA", "SCVE", "SUBS",
    "SUPP", "TRAD", "CHAR", "COMT", "CLPR", "DBTC", "GOVI", "HLRP",
    "INPC", "INSU", "INTE", "LBRI", "LIFI", "LOAN", "LOAR", "PENO",
    "PPTI", "RINP", "TRFD", "ADMG", "ADVA", "BLDM", "CBFF", "CBFR",
    "CCRD", "CDBL", "CFEE", "CGDD", "COST", "CPKC", "DCRD", "EDUC",
    "FAND", "FCPM", "GOVT", "ICCP", "IDCP", "IHRP", "INSM", "IVPT",
    "MSVC", "NOWS", "OFEE", "OTHR", "PADD", "PTSP", "RCKE", "RCPT",
    "REBT", "REFU", "RENT", "RIMB", "STDY", "TBIL", "TCSC", "TELI",
    "WEBI", "ANNI", "CAFI", "CFDI", "CMDT", "DERI", "DIVD", "FREX",
    "HEDG", "INVS", "PRME", "SAVG", "SECU", "SEPI", "TREA", "ANTS",
    "CVCF", "DMEQ", "DNTS", "HLTC", "HLTI", "HSPC", "ICRF", "LTCF",
    "MDCS", "VIEW", "ALLW", "ALMY", "BBSC", "BECH", "BENE", "BONU",
    "COMM", "CSLP", "GVEA", "GVEB", "GVEC", "GVED", "PAYR", "PENS",
    "PRCP", "SALA", "SSBE", "AEMP", "GFRP", "GWLT", "RHBS", "ESTX",
    "FWLV", "GSTX", "HSTX", "INTX", "NITX", "PTXP", "RDTX", "TAXS",
    "VATX", "WHLD", "TAXR", "AIRB", "BUSB", "FERB", "RLWY", "TRPT",
    "CBTV", "ELEC", "ENRG", "GASB", "NWCH", "NWCM", "OTLC", "PHON",
    "UBIL", "WTER",
})

# =============================================================================
# Text Limits
# =============================================================================

TEXT_LENGTH_VERY_SHORT = 35
TEXT_LENGTH_SHORT = 70
TEXT_LENGTH_LONG = 140
TEXT_LENGTH_SIGNATURE = 1025

# =============================================================================
# Validation Patterns
# =============================================================================

# Form input patterns (whitespace tolerant, case insensitive)
HTML_PATTERN_IBAN = r"([a-zA-Z]\s*){2}([0-9]\s?){2}\s*([a-zA-Z0-9]\s*){1,30}"
HTML_PATTERN_BIC = r"([a-zA-Z]\s*){6}[a-zA-Z2-9]\s*[a-nA-Np-zP-Z0-9]\s*(([A-Z0-9]\s*){3}){0,1}"

IBAN_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]{1,30}$")
# Position 8 excludes the letter O
BIC_PATTERN = re.compile(r"^[A-Z]{6}[A-Z2-9][A-NP-Z0-9]([A-Z0-9]{3})?$")
CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")

# RestrictedPersonIdentifierSEPA
CREDITOR_IDENTIFIER_PATTERN = re.compile(
    r"^[a-zA-Z]{2}[0-9]{2}[A-Za-z0-9+?/\-:().,']{3}[A-Za-z0-9+?/\-:().,']{1,28}$"
)

# Message-, payment- and transfer ids (since 2016 also mandate ids on some versions)
RESTRICTED_IDENTIFICATION_SEPA1_PATTERN = re.compile(r"^[A-Za-z0-9+?/\-:().,'\s]{1,35}$")
# Mandate ids
RESTRICTED_IDENTIFICATION_SEPA2_PATTERN = re.compile(r"^[A-Za-z0-9+?/\-:().,']{1,35}$")

SEPA_CHARSET_PATTERN = re.compile(r"^[a-zA-Z0-9/\-?:().,'+ ]*$")

# =============================================================================
# Country Tables
# =============================================================================

IBAN_COUNTRY_PATTERNS = {
    "EG": r"EG[0-9]{2}[0-9A-Z]{23}",
    "AL": r"AL[0-9]{10}[0-9A-Z]{16}",
    "DZ": r"DZ[0-9]{2}[0-9A-Z]{20}",
    "AD": r"AD[0-9]{10}[0-9A-Z]{12}",
    "AO": r"AO[0-9]{2}[0-9A-Z]{21}",
    "AZ": r"AZ[0-9]{2}[0-9A-Z]{24}",
    "BH": r"BH[0-9]{2}[0-9A-Z]{18}",
    "BE": r"BE[0-9]{14}",
    "BJ": r"BJ[0-9]{2}[0-9A-Z]{24}",
    "BA": r"BA[0-9]{18}",
    "BR": r"BR[0-9]{2}[0-9A-Z]{25}",
    "VG": r"VG[0-9]{2}[0-9A-Z]{20}",
    "BG": r"BG[0-9]{2}[A-Z]{4}[0-9]{6}[0-9A-Z]{8}",
    "BF": r"BF[0-9]{2}[0-9A-Z]{23}",
    "BI": r"BI[0-9]{2}[0-9A-Z]{12}",
    "CR": r"CR[0-9]{2}[0-9A-Z]{17}",
    "CI": r"CI[0-9]{2}[0-9A-Z]{24}",
    "DK": r"DK[0-9]{16}",
    "DE": r"DE[0-9]{20}",
    "DO": r"DO[0-9]{2}[0-9A-Z]{24}",
    "EE": r"EE[0-9]{18}",
    "FO": r"FO[0-9]{16}",
    "FI": r"FI[0-9]{16}",
    "FR": r"FR[0-9]{2}[0-9A-Z]{23}",
    "GA": r"GA[0-9]{2}[0-9A-Z]{23}",
    "GE": r"GE[0-9]{2}[A-Z]{2}[0-9A-Z]{16}",
    "GI": r"GI[0-9]{2}[A-Z]{4}[0-9]{15}",
    "GR": r"GR[0-9]{9}[0-9A-Z]{16}",
    "GL": r"GL[0-9]{16}",
    "GT": r"GT[0-9]{2}[0-9A-Z]{24}",
    "IR": r"IR[0-9]{2}[0-9A-Z]{22}",
    "IE": r"IE[0-9]{2}[A-Z]{4}[0-9]{14}",
    "IS": r"IS[0-9]{24}",
    "IL": r"IL[0-9]{21}",
    "IT": r"IT[0-9]{2}[A-Z]{1}[0-9]{10}[0-9A-Z]{12}",
    "JO": r"JO[0-9]{2}[0-9A-Z]{26}",
    "CM": r"CM[0-9]{2}[0-9A-Z]{23}",
    "CV": r"CV[0-9]{2}[0-9A-Z]{21}",
    "KZ": r"KZ[0-9]{5}[0-9A-Z]{13}",
    "QA": r"QA[0-9]{2}[0-9A-Z]{25}",
    "CG": r"CG[0-9]{2}[0-9A-Z]{23}",
    "KS": r"KS[0-9]{2}[0-9A-Z]{16}",
    "HR": r"HR[0-9]{19}",
    "KW": r"KW[0-9]{2}[A-Z]{4}[0-9A-Z]{22}",
    "LV": r"LV[0-9]{2}[A-Z]{4}[0-9A-Z]{13}",
    "LB": r"LB[0-9]{6}[0-9A-Z]{20}",
    "LI": r"LI[0-9]{7}[0-9A-Z]{12}",
    "LT": r"LT[0-9]{18}",
    "LU": r"LU[0-9]{5}[0-9A-Z]{13}",
    "MG": r"MG[0-9]{2}[0-9A-Z]{23}",
    "ML": r"ML[0-9]{2}[0-9A-Z]{24}",
    "MT": r"MT[0-9]{2}[A-Z]{4}[0-9]{5}[0-9A-Z]{18}",
    "MR": r"MR[0-9]{25}",
    "MU": r"MU[0-9]{2}[0-9A-Z]{23}[A-Z]{3}",
    "MK": r"MK[0-9]{5}[0-9A-Z]{10}[0-9]{2}",
    "MD": r"MD[0-9]{2}[0-9A-Z]{20}",
    "MC": r"MC[0-9]{12}[0-9A-Z]{11}[0-9]{2}",
    "ME": r"ME[0-9]{20}",
    "MZ": r"MZ[0-9]{2}[0-9A-Z]{21}",
    "NL": r"NL[0-9]{2}[A-Z]{4}[0-9]{10}",
    "NO": r"NO[0-9]{13}",
    "AT": r"AT[0-9]{18}",
    "TL": r"TL[0-9]{2}[0-9A-Z]{16}",
    "PK": r"PK[0-9]{2}[0-9A-Z]{20}",
    "PS": r"PS[0-9]{2}[0-9A-Z]{25}",
    "PL": r"PL[0-9]{26}",
    "PT": r"PT[0-9]{23}",
    "RO": r"RO[0-9]{2}[A-Z]{4}[0-9A-Z]{16}",
    "SM": r"SM[0-9]{2}[A-Z]{1}[0-9]{10}[0-9A-Z]{12}",
    "ST": r"ST[0-9]{2}[0-9A-Z]{21}",
    "SA": r"SA[0-9]{4}[0-9A-Z]{18}",
    "SE": r"SE[0-9]{22}",
    "CH": r"CH[0-9]{2}[0-9]{5}[0-9A-Z]{12}",
    "SN": r"SN[0-9]{2}[0-9A-Z]{24}",
    "RS": r"RS[0-9]{20}",
    "SK": r"SK[0-9]{22}",
    "SI": r"SI[0-9]{17}",
    "ES": r"ES[0-9]{22}",
    "CZ": r"CZ[0-9]{22}",
    "TN": r"TN[0-9]{22}",
    "TR": r"TR[0-9]{7}[0-9A-Z]{17}",
    "HU": r"HU[0-9]{26}",
    "AE": r"AE[0-9]{2}[0-9A-Z]{19}",
    "GB": r"GB[0-9]{2}[A-Z]{4}[0-9]{14}",
    "CY": r"CY[0-9]{10}[0-9A-Z]{16}",
    "CF": r"CF[0-9]{2}[0-9A-Z]{23}",
}

IBAN_COUNTRY_SHAPES = {
    country: re.compile(f"^{pattern}$")
    for country, pattern in IBAN_COUNTRY_PATTERNS.items()
}

EEA_COUNTRIES = frozenset({
    "IS", "LI", "NO", "BE", "BG", "DK", "DE", "EE", "FI", "FR", "GR",
    "IE", "IT", "HR", "LV", "LT", "LU", "MT", "NL", "AT", "PL", "PT",
    "RO", "SE", "SK", "SI", "ES", "CZ", "HU", "GB", "CY",
})

# IBAN country code -> BIC country codes that may serve it
BIC_IBAN_COUNTRY_CODE_EXCEPTIONS = {
    "FR": frozenset({"GF", "GP", "MQ", "RE", "PF", "TF", "YT", "NC", "BL", "MF", "PM", "WF"}),
    "GB": frozenset({"IM", "GG", "JE"}),
}

EXCEPTIONAL_BICS = frozenset({
    "NOTAVAIL",     # Austria: no BIC provided
})
