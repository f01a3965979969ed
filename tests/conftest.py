import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parents[1]

sys.path.append(str(ROOT / "src"))
sys.path.append(str(ROOT))

# Reference statement layouts, reused by parser, detector and factory tests.
HDFC_SAMPLE_TEXT = """HDFC BANK LIMITED
Statement of Account
MR RAHUL MEHTA
Account No : 50100012345678
Statement From : 01/04/2023 To : 30/04/2023

Date      Narration                Withdrawal Amt.  Deposit Amt.   Balance
          OPENING BALANCE                                          25000.00
01/04/23  SALARY CREDIT                             50000.00       75000.00
03/04/23  UPI-SWIGGY-FOOD ORDER    450.00                          74550.00
05/04/23  NEFT DR-RENT APRIL       18000.00                        56550.00
Page 1 of 1
"""

ICICI_SAMPLE_TEXT = """ICICI Bank
Name : ANANYA SHARMA
Savings Account Number: 000401234567
Statement of Transactions for the period April 1, 2023 - April 30, 2023

DATE        PARTICULARS                   DEPOSITS   WITHDRAWALS       BALANCE
            OPENING BALANCE                                          45,000.00
05-04-2023  NEFT CREDIT                  25,000.00          0.00     70,000.00
MODE** NEFT
08-04-2023  ATM WDL MG ROAD                   0.00      2,000.00     68,000.00
MODE** ATM
12-04-2023  BILLPAY AIRTEL                    0.00        799.00     67,201.00
POSTPAID
Page 1 of 1
"""


@pytest.fixture
def hdfc_text():
    return HDFC_SAMPLE_TEXT


@pytest.fixture
def icici_text():
    return ICICI_SAMPLE_TEXT
