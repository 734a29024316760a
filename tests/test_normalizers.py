from decimal import Decimal

import pytest

from household_ledger.ingest.normalizers import (
    Rule,
    first_match,
    infer_currency,
    infer_institution_type,
    is_cash_like_asset,
    normalize_account_type,
    normalize_asset_class,
    normalize_risk_level,
    normalize_sub_class,
    normalize_type,
)
from household_ledger.models import (
    AccountType,
    AssetClass,
    Currency,
    InstitutionType,
    RiskLevel,
    SubClass,
)


def test_first_match_is_ordered():
    rules = (Rule(("ab",), "first"), Rule(("a",), "second"))
    assert first_match("xab", rules, "none") == "first"
    assert first_match("xa", rules, "none") == "second"
    assert first_match("zz", rules, "none") == "none"


@pytest.mark.parametrize(
    "raw, account_name, expected",
    [
        ("투자", "미래에셋 IRP", AccountType.IRP),
        ("투자", "중개형 ISA", AccountType.ISA),
        ("투자", "CMA 통장", AccountType.CMA),
        ("투자", "업비트", AccountType.CRYPTO),
        ("투자", "연금저축펀드", AccountType.PENSION_SAVINGS),
        ("투자", "금현물 계좌", AccountType.GOLD_SPOT),
        ("투자", "달러 환전", AccountType.DEPOSIT),
        # The account name wins over the type column.
        ("연금", "ISA", AccountType.ISA),
        ("연금", "일반", AccountType.PENSION_SAVINGS),
        ("투자", "종합매매", AccountType.BROKERAGE),
        ("", "", AccountType.BROKERAGE),
        (None, None, AccountType.BROKERAGE),
    ],
)
def test_normalize_account_type(raw, account_name, expected):
    assert normalize_account_type(raw, account_name) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("위험", RiskLevel.AGGRESSIVE),
        ("공격형", RiskLevel.AGGRESSIVE),
        ("안전", RiskLevel.CONSERVATIVE),
        ("", RiskLevel.CONSERVATIVE),
        (None, RiskLevel.CONSERVATIVE),
    ],
)
def test_normalize_risk_level(value, expected):
    assert normalize_risk_level(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("주식", AssetClass.EQUITY),
        ("정기예금", AssetClass.DEPOSIT),
        ("적금", AssetClass.DEPOSIT),
        ("금", AssetClass.GOLD),
        # "현금" contains "금"; first match wins.
        ("현금", AssetClass.GOLD),
        ("채권", AssetClass.BOND),
        ("암호화폐", AssetClass.CRYPTO),
        ("기타", AssetClass.EQUITY),
    ],
)
def test_normalize_asset_class(value, expected):
    assert normalize_asset_class(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("성장주", SubClass.GROWTH),
        ("배당주", SubClass.DIVIDEND),
        ("국고채", SubClass.GOVERNMENT_BOND),
        ("회사채", SubClass.CORPORATE_BOND),
        ("외화", None),
        (None, None),
    ],
)
def test_normalize_sub_class(value, expected):
    assert normalize_sub_class(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("수입", "income"),
        (" 지출 ", "expense"),
        ("Income", "income"),
        ("EXPENSE", "expense"),
        ("기타", None),
        ("", None),
        (None, None),
        (123, None),
    ],
)
def test_normalize_type(value, expected):
    assert normalize_type(value) == expected


def test_infer_institution_type():
    assert infer_institution_type("한국투자증권") is InstitutionType.BROKERAGE
    assert infer_institution_type("나무") is InstitutionType.BROKERAGE
    assert infer_institution_type("KB증권") is InstitutionType.BROKERAGE
    assert infer_institution_type("KB국민은행") is InstitutionType.BANK
    assert infer_institution_type("") is InstitutionType.BANK


def test_infer_currency():
    assert infer_currency(Decimal("1350.5")) is Currency.USD
    assert infer_currency(Decimal("1")) is Currency.KRW
    assert infer_currency(Decimal("0.9")) is Currency.KRW
    assert infer_currency(None) is Currency.KRW


def test_is_cash_like_asset():
    assert is_cash_like_asset("정기예금")
    assert is_cash_like_asset("발행어음 RP")
    assert is_cash_like_asset("MMF")
    assert is_cash_like_asset("네이버페이 포인트")
    assert not is_cash_like_asset("KODEX 200")
    assert not is_cash_like_asset("corp bond")
