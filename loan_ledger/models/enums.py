"""Enumeration types for loan contracts and schedules."""

from enum import Enum


class ContractType(str, Enum):
    CAPTADO = "CAPTADO"  # borrowed
    CEDIDO = "CEDIDO"  # lent


class ContractStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SETTLED = "SETTLED"


class OperationType(str, Enum):
    ORIGINATION = "ORIGINATION"
    PAYMENT = "PAYMENT"


class AmortizationSystem(str, Enum):
    PRICE = "PRICE"
    SAC = "SAC"


class Periodicity(str, Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    SEMIANNUAL = "SEMIANNUAL"
    ANNUAL = "ANNUAL"


class DayCountConvention(str, Enum):
    THIRTY_360 = "30/360"
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    BUS_252 = "BUS/252"


class Compounding(str, Enum):
    EXPONENTIAL = "EXPONENTIAL"
    LINEAR = "LINEAR"


class RoundingMode(str, Enum):
    HALF_UP = "HALF_UP"
    HALF_EVEN = "HALF_EVEN"


class GraceType(str, Enum):
    INTEREST_ONLY = "INTEREST_ONLY"
    CAPITALIZED = "CAPITALIZED"


class AccrualFrequency(str, Enum):
    DAILY = "DAILY"
    MONTHLY = "MONTHLY"
    ANNUAL = "ANNUAL"
