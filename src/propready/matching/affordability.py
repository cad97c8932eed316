"""
Estimación de cuota mensual para el monto pre-calificado.
"""

from propready.matching.scoring import round_half_up


def estimate_monthly_repayment(
    amount: float,
    annual_rate: float = 0.10,
    years: int = 20,
) -> int:
    """
    Cuota mensual de un préstamo amortizable: P * r(1+r)^n / ((1+r)^n - 1).

    Args:
        amount: Capital (monto pre-calificado o precio)
        annual_rate: Tasa anual (0.10 = 10%)
        years: Plazo en años

    Returns:
        Cuota redondeada; 0 si el monto o el plazo no son positivos
    """
    if not amount or amount <= 0 or years <= 0:
        return 0

    payments = years * 12
    monthly_rate = annual_rate / 12

    if monthly_rate <= 0:
        return round_half_up(amount / payments)

    growth = (1 + monthly_rate) ** payments
    return round_half_up(amount * (monthly_rate * growth) / (growth - 1))
