from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from datetime import date, timedelta
from decimal import Decimal
import random
import os


CUSTOMERS = [
    "RAHUL MEHTA",
    "ANANYA SHARMA",
    "VIKRAM IYER",
    "NEHA KAPOOR",
    "AMIT VERMA",
]

STATEMENT_MONTHS = [
    (date(2023, 4, 1), date(2023, 4, 30)),
    (date(2023, 5, 1), date(2023, 5, 31)),
    (date(2023, 6, 1), date(2023, 6, 30)),
    (date(2023, 7, 1), date(2023, 7, 31)),
    (date(2023, 8, 1), date(2023, 8, 31)),
]

DEBITS = [
    ("UPI-SWIGGY-FOOD ORDER", "UPI"),
    ("POS AMAZON.IN", "POS"),
    ("ATM WDL MG ROAD", "ATM"),
    ("BILLPAY AIRTEL POSTPAID", "BIL"),
    ("NEFT DR-RENT APRIL", "NEFT"),
]

CREDITS = [
    ("SALARY CREDIT", "NEFT"),
    ("NEFT CR-REFUND", "NEFT"),
    ("IMPS CR-FRIEND", "IMPS"),
    ("INTEREST PAID", "INT"),
]

TRANSACTION_COUNTS = [6, 8, 10, 7, 9]

FONT_NAME = "Courier"
FONT_SIZE = 8
LINE_HEIGHT = 12
MARGIN = 40

CENTS = Decimal("0.01")


def get_transactions(pdf_number, start, end, opening_balance):
    """Deterministic transactions for one statement; balances never go negative."""
    rng = random.Random(pdf_number)
    transactions = []
    balance = opening_balance
    days = (end - start).days

    for i in range(TRANSACTION_COUNTS[(pdf_number - 1) % len(TRANSACTION_COUNTS)]):
        is_credit = i == 0 or rng.random() < 0.35
        if is_credit:
            description, mode = CREDITS[0] if i == 0 else rng.choice(CREDITS[1:])
            amount = (Decimal(rng.randint(50000, 5000000)) / 100).quantize(CENTS)
            balance += amount
        else:
            description, mode = rng.choice(DEBITS)
            amount = (Decimal(rng.randint(5000, int(balance * 40))) / 100).quantize(CENTS)
            balance -= amount

        transactions.append({
            "date": start + timedelta(days=min(days, i * 3)),
            "description": description,
            "amount": amount,
            "type": "credit" if is_credit else "debit",
            "balance": balance,
            "mode": mode,
        })

    return transactions


def build_statement(bank, pdf_number):
    start, end = STATEMENT_MONTHS[(pdf_number - 1) % len(STATEMENT_MONTHS)]
    opening_balance = Decimal("25000.00") + pdf_number * 1000

    return {
        "bank": bank,
        "customer": CUSTOMERS[(pdf_number - 1) % len(CUSTOMERS)],
        "account_number": f"{50100012345670 + pdf_number}" if bank == "HDFC" else f"{401234560 + pdf_number:012d}",
        "start_date": start,
        "end_date": end,
        "opening_balance": opening_balance,
        "transactions": get_transactions(pdf_number, start, end, opening_balance),
    }


def render_hdfc_lines(statement):
    """Statement text as HDFC prints it: dd/mm/yy rows, blank unused amount column."""
    lines = [
        "HDFC BANK LIMITED",
        "Statement of Account",
        "",
        f"MR {statement['customer']}",
        f"Account No : {statement['account_number']}",
        f"Statement From : {statement['start_date']:%d/%m/%Y} To : {statement['end_date']:%d/%m/%Y}",
        "",
        f"{'Date':<10}{'Narration':<30}{'Withdrawal Amt.':>17}{'Deposit Amt.':>15}{'Balance':>15}",
        f"{'':<10}{'OPENING BALANCE':<30}{'':>17}{'':>15}{statement['opening_balance']:>15.2f}",
    ]

    for trans in statement["transactions"]:
        withdrawal = f"{trans['amount']:.2f}" if trans["type"] == "debit" else ""
        deposit = f"{trans['amount']:.2f}" if trans["type"] == "credit" else ""
        lines.append(
            f"{trans['date']:%d/%m/%y}  {trans['description']:<30}{withdrawal:>17}{deposit:>15}{trans['balance']:>15.2f}"
        )

    closing = statement["transactions"][-1]["balance"] if statement["transactions"] else statement["opening_balance"]
    lines += [
        "",
        f"{'':<10}{'CLOSING BALANCE':<30}{'':>17}{'':>15}{closing:>15.2f}",
        "Page 1 of 1",
    ]
    return lines


def render_icici_lines(statement):
    """Statement text as ICICI prints it: dd-mm-yyyy rows, 0.00 placeholders, MODE** lines."""
    lines = [
        "ICICI Bank",
        f"Name : {statement['customer']}",
        f"Savings Account Number: {statement['account_number']}",
        f"Statement of Transactions for the period {statement['start_date']:%B} {statement['start_date'].day}, "
        f"{statement['start_date']:%Y} - {statement['end_date']:%B} {statement['end_date'].day}, {statement['end_date']:%Y}",
        "",
        f"{'DATE':<12}{'PARTICULARS':<30}{'DEPOSITS':>14}{'WITHDRAWALS':>14}{'BALANCE':>14}",
        f"{'':<12}{'OPENING BALANCE':<30}{'':>14}{'':>14}{statement['opening_balance']:>14,.2f}",
    ]

    for trans in statement["transactions"]:
        deposit = trans["amount"] if trans["type"] == "credit" else Decimal("0")
        withdrawal = trans["amount"] if trans["type"] == "debit" else Decimal("0")
        lines.append(
            f"{trans['date']:%d-%m-%Y}  {trans['description']:<30}{deposit:>14,.2f}{withdrawal:>14,.2f}{trans['balance']:>14,.2f}"
        )
        lines.append(f"MODE** {trans['mode']}")

    lines += ["", "Page 1 of 1"]
    return lines


def write_pdf(lines, output_path, password=None):
    """Draw text lines in a monospaced font so columns survive extraction."""
    c = canvas.Canvas(output_path, pagesize=A4, encrypt=password)
    c.setFont(FONT_NAME, FONT_SIZE)
    _, height = A4
    y = height - MARGIN

    for line in lines:
        if y < MARGIN:
            c.showPage()
            c.setFont(FONT_NAME, FONT_SIZE)
            y = height - MARGIN
        c.drawString(MARGIN, y, line)
        y -= LINE_HEIGHT

    c.save()
    return output_path


RENDERERS = {
    "HDFC": render_hdfc_lines,
    "ICICI": render_icici_lines,
}


def generate_statement_pdf(bank, output_path, pdf_number, password=None):
    statement = build_statement(bank, pdf_number)
    write_pdf(RENDERERS[bank](statement), output_path, password=password)
    return statement


def generate_all_statement_pdfs(output_dir, bank, count=5):
    os.makedirs(output_dir, exist_ok=True)
    metadata_list = []

    for i in range(1, count + 1):
        output_path = os.path.join(output_dir, f"{bank.lower()}_statement_{i}.pdf")
        metadata = generate_statement_pdf(bank, output_path, i)
        metadata_list.append(metadata)
        print(f"Generated: {output_path}")

    return metadata_list


if __name__ == "__main__":
    output_dir = "../data/generated_pdfs"
    for bank in RENDERERS:
        generate_all_statement_pdfs(output_dir, bank)
