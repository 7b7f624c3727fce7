"""Simple interest, compound interest and loan EMI calculators."""

from dataclasses import dataclass

COMPOUNDING_FREQUENCIES = {
    1: "Annually",
    4: "Quarterly",
    12: "Monthly",
    365: "Daily",
}


@dataclass(frozen=True)
class InterestResult:
    interest: float
    total_amount: float


@dataclass(frozen=True)
class LoanResult:
    emi: float
    total_payment: float
    total_interest: float


def _check_non_negative(**values: float) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f"{name} must not be negative")


def simple_interest(principal: float, rate: float, years: float) -> InterestResult:
    """Simple Interest = (Principal x Rate x Time) / 100."""
    _check_non_negative(principal=principal, rate=rate, years=years)
    interest = principal * rate * years / 100
    return InterestResult(interest=interest, total_amount=principal + interest)


def compound_interest(principal: float, rate: float, years: float, frequency: int = 12) -> InterestResult:
    """A = P(1 + r/n)^(nt) with ``rate`` in percent and ``frequency`` periods a year."""
    _check_non_negative(principal=principal, rate=rate, years=years)
    if frequency not in COMPOUNDING_FREQUENCIES:
        raise ValueError(f"frequency must be one of {sorted(COMPOUNDING_FREQUENCIES)}")
    amount = principal * (1 + rate / (100 * frequency)) ** (frequency * years)
    return InterestResult(interest=amount - principal, total_amount=amount)


def loan_emi(amount: float, annual_rate: float, years: float) -> LoanResult:
    """Equated monthly installment.

    EMI = P x R x (1+R)^N / ((1+R)^N - 1), R the monthly rate and N the number
    of monthly payments.  A zero rate repays the principal in equal parts.
    """
    _check_non_negative(amount=amount, annual_rate=annual_rate)
    payments = round(years * 12)
    if payments <= 0:
        raise ValueError("years must cover at least one monthly payment")

    monthly_rate = annual_rate / (12 * 100)
    if monthly_rate == 0:
        emi = amount / payments
    else:
        growth = (1 + monthly_rate) ** payments
        emi = amount * monthly_rate * growth / (growth - 1)

    total = emi * payments
    return LoanResult(emi=emi, total_payment=total, total_interest=total - amount)
