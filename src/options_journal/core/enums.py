"""Domain enumerations for the options journal."""

from enum import StrEnum


class OptionType(StrEnum):
    CALL = "Call option"
    PUT = "Put option"
    COVERED_CALL = "Covered call"
    CASH_COVERED_CALL = "Cash covered call"
    CASH_SECURED_PUT = "Cash secured put"
    PMCC_CALL = "PMCC call option"
    PMCC_COVERED_CALL = "PMCC covered call"


# Form sentinel meaning "use the free-text custom type instead".
OTHER_OPTION_TYPE = "Other"


class TradeStatus(StrEnum):
    OPEN = "open"
    CLOSED = "closed"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


# Long-call types whose break-even is strike plus amortized premium.
LONG_CALL_TYPES: frozenset[str] = frozenset({OptionType.CALL, OptionType.PMCC_CALL})

# Types eligible for the expected-return percentage on edit.
COVERED_RETURN_TYPES: frozenset[str] = frozenset(
    {
        OptionType.COVERED_CALL,
        OptionType.CASH_COVERED_CALL,
        OptionType.CASH_SECURED_PUT,
        OptionType.PMCC_CALL,
    }
)

# Types whose dollars traded is the premium outlay (cost * contracts).
PREMIUM_TRADED_TYPES: frozenset[str] = frozenset({OptionType.CALL, OptionType.PUT})

# Types whose dollars traded is the secured notional (strike * 100 * contracts).
NOTIONAL_TRADED_TYPES: frozenset[str] = frozenset(
    {
        OptionType.PMCC_COVERED_CALL,
        OptionType.COVERED_CALL,
        OptionType.CASH_SECURED_PUT,
    }
)
