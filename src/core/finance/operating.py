# src/core/finance/operating.py

from __future__ import annotations

from src.schemas.models import (
    AnnualAnalysis,
    MFDeal,
    MonthlyAnalysis,
    MortgageTerms,
    OperatingStatement,
    SFRDeal,
)

from .amortization import monthly_payment
from .property import PropertyStrategy, strategy_for


def mortgage_terms(deal: SFRDeal | MFDeal) -> MortgageTerms:
    """Loan amount, monthly rate, payment count and fixed payment for the deal."""
    loan = max(0.0, deal.loan_amount)
    return MortgageTerms(
        loan_amount=loan,
        monthly_rate=deal.interest_rate / 12.0 / 100.0,
        number_of_payments=deal.loan_term * 12,
        monthly_payment=monthly_payment(loan, deal.interest_rate, deal.loan_term),
    )


def build_operating_statement(
    deal: SFRDeal | MFDeal,
    *,
    strategy: PropertyStrategy | None = None,
    mortgage: MortgageTerms | None = None,
) -> OperatingStatement:
    """
    First-year operating statement (annual amounts).

    gross -> vacancy loss -> effective income -> expense lines -> NOI -> cash flow.
    Tax and insurance use the purchase price (the year-1 property value).
    """
    strategy = strategy or strategy_for(deal)
    mortgage = mortgage or mortgage_terms(deal)

    gross = strategy.gross_monthly_rent() * 12.0
    vacancy = gross * deal.long_term.vacancy_rate / 100.0
    effective = gross - vacancy

    expenses = strategy.expense_breakdown(
        gross_rent=gross,
        effective_income=effective,
        property_value=deal.purchase_price,
        inflation_factor=1.0,
    )
    total = expenses.total
    noi = effective - total
    debt_service = mortgage.annual_debt_service

    return OperatingStatement(
        gross_income=gross,
        vacancy_loss=vacancy,
        effective_income=effective,
        expenses=expenses,
        total_expenses=total,
        noi=noi,
        debt_service=debt_service,
        cash_flow=noi - debt_service,
    )


def monthly_view(statement: OperatingStatement, mortgage: MortgageTerms) -> MonthlyAnalysis:
    opex = statement.total_expenses / 12.0
    return MonthlyAnalysis(
        gross_income=statement.gross_income / 12.0,
        vacancy_loss=statement.vacancy_loss / 12.0,
        effective_income=statement.effective_income / 12.0,
        expenses=statement.expenses.scaled(1.0 / 12.0),
        operating_expenses=opex,
        mortgage_payment=mortgage.monthly_payment,
        total_expenses=opex + mortgage.monthly_payment,
        noi=statement.noi / 12.0,
        cash_flow=statement.cash_flow / 12.0,
    )


def annual_view(statement: OperatingStatement) -> AnnualAnalysis:
    return AnnualAnalysis(
        gross_income=statement.gross_income,
        vacancy_loss=statement.vacancy_loss,
        effective_income=statement.effective_income,
        expenses=statement.expenses,
        operating_expenses=statement.total_expenses,
        noi=statement.noi,
        debt_service=statement.debt_service,
        cash_flow=statement.cash_flow,
    )
