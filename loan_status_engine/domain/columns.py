"""Spreadsheet column layout for the loan export (76 columns, A through BX)"""

from dataclasses import dataclass

LAYOUT_WIDTH = 76

# AR-BA hold the debt summary block, which the engine does not read
DEBT_SUMMARY_COLUMNS = range(43, 53)


@dataclass(frozen=True)
class ColumnMap:
    """Zero-based column index for every field the assembler reads"""

    external_id: int = 0  # A - External ID
    loan_number: int = 1  # B - Loan #
    active_debit_order: int = 2  # C - Active Debit Order
    amount_sold: int = 3  # D - Amount Sold
    client_id: int = 4  # E - Client/ID
    contract_balance: int = 5  # F - Contract balance
    days_overdue_mpf: int = 6  # G - Days Overdue (MPF)
    days_overdue: int = 7  # H - Days overdue
    loan_amount: int = 8  # I - Loan amount
    loan_term: int = 9  # J - Loan term
    payout_date: int = 10  # K - Payout date
    progress: int = 11  # L - Progress
    remaining_amount: int = 12  # M - Remaining Amount
    state: int = 13  # N - State
    paydate_date: int = 14  # O - Paydates/Date
    paydate_amount: int = 15  # P - Paydates/Amount
    trans_date: int = 16  # Q - Transactions/Date
    trans_reference: int = 17  # R - Transactions/Reference
    trans_type_id: int = 18  # S - Transactions/Type/ID
    trans_type_name: int = 19  # T - Transactions/Type/Name
    trans_debit: int = 20  # U - Transactions/Debit
    trans_credit: int = 21  # V - Transactions/Credit
    trans_balance: int = 22  # W - Transactions/Balance
    payment_frequency: int = 23  # X - Payment frequency
    installment_amount: int = 24  # Y - Instalment amount
    last_installment_amount: int = 25  # Z - Last instalment amount
    client_display_name: int = 26  # AA - Client/Display Name
    client_industry_sector: int = 27  # AB - Client/Industry Sector/Display Name
    client_industry_subsector: int = 28  # AC - Client/Industry Subsector/Display Name
    client_date_founded: int = 29  # AD - Client/Date Founded
    client_address_line1: int = 30  # AE - Client/Address Line 1
    client_address_line2: int = 31  # AF - Client/Address Line 2
    client_address_line3: int = 32  # AG - Client/Address Line 3
    client_city: int = 33  # AH - Client/City/Display Name
    client_state: int = 34  # AI - Client/State/Display Name
    client_country: int = 35  # AJ - Client/Country/Display Name
    client_zip_code: int = 36  # AK - Client/ZIP Code
    client_email: int = 37  # AL - Client/Email
    client_primary_no: int = 38  # AM - Client/Primary No.
    lead_id: int = 39  # AN - Lead/ID
    lead_fico: int = 40  # AO - Lead/FICO
    lead_avg_monthly_revenue: int = 41  # AP - Lead/Average Monthly Revenue
    lead_avg_mca_debts: int = 42  # AQ - Lead/Average MCA Debits
    contract_interest: int = 53  # BB - Contract interest
    origination_fee: int = 54  # BC - Origination Fee
    first_payment_date: int = 55  # BD - First payment date
    lead_created_on: int = 56  # BE - Lead/Created on
    lead_closed_date: int = 57  # BF - Lead/Closed Date
    end_date: int = 58  # BG - End date
    lead_sell_rate: int = 59  # BH - Lead/Sell Rate
    compound_date: int = 60  # BI - Compound Date
    days_overdue_on_write_off: int = 61  # BJ - Days overdue (on day of write-off)
    amount_overdue_on_write_off: int = 62  # BK - Amount overdue (on day of write-off)
    amount_overdue: int = 63  # BL - Amount overdue
    lead_avg_num_deposits: int = 64  # BM - Lead/Average Num Deposits
    lead_avg_num_credits: int = 65  # BN - Lead/Average Num Credits
    lead_avg_deposits: int = 66  # BO - Lead/Avg Deposits
    lead_avg_credits: int = 67  # BP - Lead/Avg Credits
    lead_avg_daily_balance: int = 68  # BQ - Lead/Avg Daily Balance
    lead_avg_nsfs: int = 69  # BR - Lead/Avg NSFs
    lead_avg_negative_days: int = 70  # BS - Lead/Avg Negative Days
    lead_avg_revenue: int = 71  # BT - Lead/Avg Revenue
    loan_restructured: int = 72  # BU - Loan Restructured
    lead_underwriter: int = 73  # BV - Lead/Underwriter/Display Name
    lead_salesperson: int = 74  # BW - Lead/Salesperson/Display Name
    lead_pod_leader: int = 75  # BX - Lead/Pod Leader/Display Name

    def cell(self, row, field_name: str):
        """Return the cell for a named field, None when the row is too short"""
        index = getattr(self, field_name)
        return row[index] if index < len(row) else None


DEFAULT_COLUMNS = ColumnMap()

# Header cells that must be present for the sheet to look like a loan export
REQUIRED_HEADER_FIELDS = ("external_id", "loan_number", "loan_amount", "client_id")
