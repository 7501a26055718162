import logging

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from rentorbuy import RefinancePlan, Scenario, compare, find_breakeven, sweep_variable
from rentorbuy.config import PRESETS, SENSITIVITY_VARIABLES
from rentorbuy.tax_tables import STATE_TAX_DATA

logging.basicConfig(level=logging.INFO)

st.set_page_config(page_title="Rent or Buy Projection", layout="wide")

# Custom CSS for styling
st.markdown("""
<style>
    div[data-testid="metric-container"] {
        font-size: 14px !important;
    }
    .dataframe td, .dataframe th {
        font-size: 12px !important;
    }
    .highlight-box {
        background-color: #e6f3ff;
        padding: 10px;
        border-radius: 5px;
        border: 1px solid #d3e3ff;
    }
</style>
""", unsafe_allow_html=True)

st.title("Rent or Buy Projection")

with st.expander("Welcome & Instructions", expanded=False):
    st.markdown("""
    This tool compares **owning a home** against **renting and investing** over the years you choose.

    **Methodology:**
    - Buying: P&I, PMI, property tax, insurance, HOA, maintenance, utilities and any refinance costs, less the
      yearly tax benefit when itemizing beats the standard deduction.
    - Renting: rent (growing yearly), renter's insurance and utilities.
    - The down payment and points a renter keeps are invested; each year the cheaper option invests the difference.
    - Result: home equity after selling costs plus invested savings, against the renter's portfolio.
    """)

# Inputs
st.header("Inputs")
col_preset, col_reset = st.columns([1, 1])
with col_preset:
    preset = st.selectbox("Load Preset Values", list(PRESETS), help="Select a preset to auto-fill values based on common scenarios.")
with col_reset:
    if st.button("Apply", help="Revert all inputs to the preset's values."):
        st.session_state.clear()

default_values = PRESETS[preset]
for key, value in default_values.items():
    if key not in st.session_state:
        st.session_state[key] = value

st.subheader("Buying Parameters")
with st.container(border=True):
    col1, col2 = st.columns(2)
    with col1:
        home_price = st.number_input("Home Price ($)", value=float(st.session_state["home_price"]), step=10_000.0, min_value=0.0)
        down_payment = st.number_input("Down Payment ($)", value=float(st.session_state["down_payment"]), step=1_000.0, min_value=0.0, max_value=home_price)
        mortgage_rate = st.number_input("Mortgage Rate (%)", value=st.session_state["mortgage_rate"] * 100, step=0.125, min_value=0.0, format="%.3f")
        loan_term_years = st.number_input("Loan Length (Years)", value=int(st.session_state["loan_term_years"]), step=1, min_value=1, max_value=50)
        extra_monthly_payment = st.number_input("Extra Monthly Principal ($)", value=float(st.session_state["extra_monthly_payment"]), step=50.0, min_value=0.0)
        include_pmi = st.checkbox("Include PMI", value=st.session_state["include_pmi"], help="Charged while loan-to-value is above 80%.")
        buying_points = st.checkbox("Buy Points to Reduce Rate?", value=st.session_state["buying_points"])
        num_points = st.number_input("Number of Points", value=float(st.session_state["num_points"]), step=0.25, min_value=0.0) if buying_points else 0.0
    with col2:
        states = sorted(STATE_TAX_DATA)
        state = st.selectbox("State", states, index=states.index(st.session_state["state"]))
        filing_status = st.selectbox("Filing Status", ["married", "single"], index=["married", "single"].index(st.session_state["filing_status"]))
        taxable_income = st.number_input("Taxable Income ($)", value=float(st.session_state["taxable_income"]), step=5_000.0, min_value=0.0)
        home_insurance = st.number_input("Home Insurance ($/yr)", value=float(st.session_state["home_insurance"]), step=50.0, min_value=0.0)
        hoa_monthly = st.number_input("HOA ($/mo)", value=float(st.session_state["hoa_monthly"]), step=25.0, min_value=0.0)
        maintenance_rate = st.number_input("Maintenance (% of value/yr)", value=st.session_state["maintenance_rate"] * 100, step=0.1, min_value=0.0)
        monthly_utilities = st.number_input("Utilities ($/mo)", value=float(st.session_state["monthly_utilities"]), step=25.0, min_value=0.0)

st.subheader("Renting and Market Assumptions")
with st.container(border=True):
    col1, col2 = st.columns(2)
    with col1:
        monthly_rent = st.number_input("Monthly Rent ($)", value=float(st.session_state["monthly_rent"]), step=50.0, min_value=0.0)
        annual_rent_increase = st.number_input("Annual Rent Increase (%)", value=st.session_state["annual_rent_increase"] * 100, step=0.5, min_value=0.0)
        years_to_analyze = st.number_input("Years to Analyze", value=int(st.session_state["years_to_analyze"]), step=1, min_value=1, max_value=50)
    with col2:
        home_appreciation_rate = st.number_input("Home Appreciation (%)", value=st.session_state["home_appreciation_rate"] * 100, step=0.5)
        investment_return_rate = st.number_input("Investment Return (%)", value=st.session_state["investment_return_rate"] * 100, step=0.5)
        include_selling_costs = st.checkbox("Include Selling Costs (6%)", value=st.session_state["include_selling_costs"])

with st.expander("Refinance", expanded=False):
    show_refinance = st.checkbox("Model a Refinance?", value=False, help="Replace the loan with a new fixed-rate loan at the end of a year.")
    col1, col2 = st.columns(2)
    with col1:
        refi_year = st.number_input("Refinance After Year", value=min(5, int(loan_term_years)), step=1, min_value=1, max_value=int(loan_term_years))
        refi_rate = st.number_input("Refinance Rate (%)", value=5.5, step=0.125, min_value=0.0, format="%.3f")
    with col2:
        refi_term_years = st.number_input("Refinance Term (Years)", value=30, step=1, min_value=1, max_value=50)
        refi_points = st.number_input("Refinance Points", value=0.0, step=0.25, min_value=0.0)
        refi_closing = st.number_input("Closing Costs (% of balance)", value=2.0, step=0.25, min_value=0.0)

inputs = {
    "home_price": home_price, "down_payment": down_payment, "mortgage_rate": mortgage_rate / 100,
    "loan_term_years": int(loan_term_years), "extra_monthly_payment": extra_monthly_payment,
    "include_pmi": include_pmi, "buying_points": buying_points, "num_points": num_points, "state": state,
    "filing_status": filing_status, "taxable_income": taxable_income, "home_insurance": home_insurance,
    "hoa_monthly": hoa_monthly, "maintenance_rate": maintenance_rate / 100, "monthly_rent": monthly_rent,
    "annual_rent_increase": annual_rent_increase / 100, "years_to_analyze": int(years_to_analyze),
    "home_appreciation_rate": home_appreciation_rate / 100, "investment_return_rate": investment_return_rate / 100,
    "include_selling_costs": include_selling_costs, "monthly_utilities": monthly_utilities,
}
refi_inputs = {
    "enabled": show_refinance, "year": int(refi_year), "new_rate": refi_rate / 100,
    "new_term_years": int(refi_term_years), "new_points": refi_points, "closing_cost_rate": refi_closing / 100,
}


def build_scenario(inputs, refi_inputs):
    return Scenario.from_dict(inputs, refinance=RefinancePlan(**refi_inputs))


@st.cache_data
def run_comparison(inputs, refi_inputs):
    return compare(build_scenario(inputs, refi_inputs))


@st.cache_data
def run_sweep(inputs, refi_inputs, variable):
    return sweep_variable(build_scenario(inputs, refi_inputs), variable)


result = run_comparison(inputs, refi_inputs)
buy, rent = result.buy, result.rent

# Results
st.header("Verdict")
with st.container(border=True):
    cols = st.columns(4)
    cols[0].metric("Better Option", "Buying" if result.buying_is_better else "Renting")
    cols[1].metric("Advantage", f"${result.advantage:,.0f}")
    cols[2].metric("Buy Net Position", f"${result.buy_net:,.0f}", help="Equity after selling costs plus invested savings.")
    cols[3].metric("Rent Net Position", f"${result.rent_net:,.0f}", help="Final investment balance.")

st.header("Mortgage Metrics")
with st.container(border=True):
    cols = st.columns(4)
    cols[0].metric("Monthly P&I", f"${buy.monthly_payment:,.2f}")
    cols[1].metric("Effective Rate", f"{buy.effective_rate * 100:.3f}%")
    cols[2].metric("Points Cost", f"${buy.points_cost:,.0f}")
    cols[3].metric("Payoff", f"{buy.payoff_month} months", delta=f"{buy.months_saved} months saved" if buy.months_saved else None)
    cols = st.columns(4)
    cols[0].metric("PMI Drops Off", f"Month {buy.pmi_dropoff_month}" if buy.pmi_dropoff_month else "Not applicable")
    cols[1].metric("Total Tax Savings", f"${buy.total_tax_savings:,.0f}")
    cols[2].metric("Final Home Value", f"${buy.final_home_value:,.0f}")
    cols[3].metric("Selling Costs", f"${buy.selling_costs:,.0f}")

monthly = buy.first_year_monthly
if monthly is not None:
    st.header("Monthly Cost (Year 1)")
    with st.container(border=True):
        cols = st.columns(4)
        cols[0].metric("P&I", f"${monthly.principal_interest:,.2f}")
        cols[1].metric("PMI", f"${monthly.pmi:,.2f}")
        cols[2].metric("Property Tax", f"${monthly.property_tax:,.2f}")
        cols[3].metric("Insurance", f"${monthly.insurance:,.2f}")
        cols = st.columns(4)
        cols[0].metric("HOA", f"${monthly.hoa:,.2f}")
        cols[1].metric("Total Housing Cost", f"${monthly.total:,.2f}", help="P&I, PMI, property tax, insurance, HOA and utilities.")
        cols[2].metric("With Extra Principal", f"${monthly.total_with_extra:,.2f}")
        cols[3].metric("Net Monthly Cost", f"${monthly.net:,.2f}", delta=f"-{monthly.tax_benefit:,.2f} tax benefit", delta_color="off",
                       help="Includes maintenance, less the monthly share of the year 1 tax benefit.")

st.header("Tax Deduction Analysis (Year 1)")
deduction = buy.first_year_deduction
with st.container(border=True):
    cols = st.columns(4)
    cols[0].metric("Marginal Tax Rate", f"{buy.marginal_rate:.0%}")
    cols[1].metric("State Income Tax", f"${buy.state_income_tax:,.0f}")
    if deduction is not None:
        cols[2].metric("Mortgage Interest", f"${deduction.mortgage_interest:,.0f}")
        cols[3].metric(f"SALT Deduction (Cap: ${deduction.salt_cap:,.0f})", f"${deduction.salt_deduction:,.0f}")
        cols = st.columns(4)
        cols[0].metric("Total Itemized", f"${deduction.total_itemized:,.0f}")
        cols[1].metric(f"Standard Deduction ({filing_status})", f"${deduction.standard_deduction:,.0f}")
        cols[2].metric("Excess Over Standard", f"${deduction.excess_deduction:,.0f}")
        cols[3].metric("Year 1 Tax Savings", f"${deduction.tax_savings:,.0f}",
                       delta="Itemize" if deduction.should_itemize else "Take the standard deduction", delta_color="off")
    else:
        cols[2].metric("Mortgage Interest", "$0", help="No mortgage interest in year 1, so nothing to itemize.")
    st.caption("Tax benefits are worked out each year. As interest falls you may switch to the standard deduction, "
               "and they stop once the mortgage is paid off.")

if buy.refinance is not None:
    refi = buy.refinance
    st.header("Refinance")
    with st.container(border=True):
        cols = st.columns(4)
        cols[0].metric("Balance Refinanced", f"${refi.remaining_balance:,.0f}", help=f"Month {refi.month}")
        cols[1].metric("New Payment", f"${refi.new_monthly_payment:,.2f}", delta=f"{refi.monthly_savings:,.2f} saved/mo")
        cols[2].metric("Loan-to-Value", f"{refi.loan_to_value:.1%}", help="PMI resumes" if refi.pmi_resumes else "No PMI on the new loan")
        cols[3].metric("Refinance Costs", f"${refi.total_cost:,.0f}")
elif show_refinance:
    st.info("The refinance was not applied: the year falls outside the loan term or the loan is already repaid.")

money = "${:,.2f}"
st.header("Yearly Breakdown")
tab1, tab2, tab3 = st.tabs(["Buying", "Renting", "Amortization"])
with tab1:
    st.dataframe(
        buy.yearly.style.format({col: money for col in buy.yearly.columns if buy.yearly[col].dtype == float})
        .apply(lambda row: ["background-color: #e6f3ff" if row["Refinanced"] else ""] * len(row), axis=1),
        hide_index=True
    )
with tab2:
    st.dataframe(rent.yearly.style.format({col: money for col in rent.yearly.columns if col != "Year"}), hide_index=True)
with tab3:
    st.dataframe(
        buy.schedule.style.format({
            "Payment": money, "Principal": money, "Interest": money, "Extra Principal Payments": money,
            "Cumulative Interest": money, "Cumulative Principal": money, "Balance": money, "Rate": "{:.3%}",
        }).apply(lambda row: ["background-color: #e6f3ff" if row["Loan Type"] == "Refinance" else ""] * len(row), axis=1),
        hide_index=True
    )

st.header("Net Position Over Time")
asset_data = pd.concat([
    pd.DataFrame({"Year": buy.yearly["Year"], "Value": buy.yearly["Equity"] + buy.yearly["Savings Investment Balance"], "Type": "Buying (Equity + Savings)"}),
    pd.DataFrame({"Year": rent.yearly["Year"], "Value": rent.yearly["Investment End Balance"], "Type": "Renting (Investments)"}),
])
fig_assets = px.line(asset_data, x="Year", y="Value", color="Type", markers=True)
fig_assets.update_layout(
    plot_bgcolor="rgb(245, 245, 245)", paper_bgcolor="rgb(245, 245, 245)",
    xaxis_title="Year", yaxis_title="Value ($)",
    legend=dict(yanchor="top", y=1.1, xanchor="left", x=0)
)
st.plotly_chart(fig_assets, use_container_width=True)

st.header("Costs")
cost_data = pd.concat([
    pd.DataFrame({"Year": buy.yearly["Year"], "Cost": buy.yearly["Total Cost"], "Type": "Buying"}),
    pd.DataFrame({"Year": rent.yearly["Year"], "Cost": rent.yearly["Total Cost"], "Type": "Renting"}),
])
fig_costs = px.line(cost_data, x="Year", y="Cost", color="Type", markers=True)
fig_costs.update_layout(
    plot_bgcolor="rgb(245, 245, 245)", paper_bgcolor="rgb(245, 245, 245)",
    xaxis_title="Year", yaxis_title="Annual Cost ($)",
    legend=dict(yanchor="top", y=1.1, xanchor="left", x=0)
)
st.plotly_chart(fig_costs, use_container_width=True)

fig_amort = go.Figure()
fig_amort.add_trace(go.Scatter(x=buy.schedule["Month"], y=buy.schedule["Principal"], mode="lines", name="Principal"))
fig_amort.add_trace(go.Scatter(x=buy.schedule["Month"], y=buy.schedule["Interest"], mode="lines", name="Interest"))
fig_amort.add_trace(go.Scatter(x=buy.schedule["Month"], y=buy.schedule["Balance"], mode="lines", name="Balance", yaxis="y2", line=dict(dash="dot")))
fig_amort.update_layout(
    xaxis_title="Month", yaxis_title="Payment ($)",
    yaxis2=dict(title="Balance ($)", overlaying="y", side="right"),
    legend=dict(yanchor="top", y=1.1, xanchor="left", x=0)
)
st.plotly_chart(fig_amort, use_container_width=True)

# Sensitivity
st.header("Sensitivity Analysis")
variable = st.selectbox("Variable to Analyze", list(SENSITIVITY_VARIABLES), format_func=lambda key: SENSITIVITY_VARIABLES[key][0])
sweep = run_sweep(inputs, refi_inputs, variable)
breakeven = find_breakeven(sweep)
if breakeven is not None:
    st.markdown(
        f'<div class="highlight-box">Breakeven at <b>{breakeven.value:,.4g}</b> '
        f'(between {breakeven.lower:,.4g} and {breakeven.upper:,.4g})</div>',
        unsafe_allow_html=True
    )
else:
    st.markdown('<div class="highlight-box">No breakeven within the swept range.</div>', unsafe_allow_html=True)

fig_sweep = px.bar(
    sweep, x="Value", y="Difference", color="Buying Is Better",
    color_discrete_map={True: "#1f77b4", False: "#ff7f0e"},
    labels={"Value": SENSITIVITY_VARIABLES[variable][0], "Difference": "Buy - Rent ($)"}
)
st.plotly_chart(fig_sweep, use_container_width=True)
st.dataframe(sweep.style.format({"Buy Net": money, "Rent Net": money, "Difference": money}), hide_index=True)
