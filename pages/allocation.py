import streamlit as st
import matplotlib.pyplot as plt

from utils.tables import (
    ALLOCATION_COLUMNS, ASSET_COLUMN, INVESTMENT_COLUMN, RATIO_COLUMN, RETURN_COLUMN, RISK_COLUMN,
    allocation_frame, apply_allocation_edits, apply_correlation_edits, correlation_frame,
    is_valid_asset_name
)


def show_allocation_page():
    """Display the asset allocation page with editable tables and portfolio totals."""
    st.title("Asset Allocation")

    session = st.session_state.allocation_session

    show_allocation_table(session)
    show_correlation_table(session)
    show_asset_controls(session)
    show_totals(session)


def _warn_rejections(results):
    for *cell, result in results:
        if not result:
            st.warning(f"{' / '.join(str(c) for c in cell)}: {result.reason}")


def show_allocation_table(session):
    """Display the allocation table, total investment and fee inputs."""
    st.header("Allocation")

    before = allocation_frame(session)
    edited = st.data_editor(
        before,
        column_config={
            ASSET_COLUMN: st.column_config.TextColumn(ASSET_COLUMN, disabled=True),
            INVESTMENT_COLUMN: st.column_config.NumberColumn(
                INVESTMENT_COLUMN, format="%.2f", min_value=0.0
            ),
            RATIO_COLUMN: st.column_config.NumberColumn(
                RATIO_COLUMN, format="%.2f", min_value=0.0, max_value=100.0
            ),
            RETURN_COLUMN: st.column_config.NumberColumn(RETURN_COLUMN, format="%.2f"),
            RISK_COLUMN: st.column_config.NumberColumn(RISK_COLUMN, format="%.2f", min_value=0.0)
        },
        column_order=ALLOCATION_COLUMNS,
        use_container_width=True,
        hide_index=True,
        key=f"allocation_editor_{len(before)}"
    )

    results = apply_allocation_edits(session, before, edited)
    _warn_rejections(results)
    if any(result for *_, result in results):
        st.rerun()

    col1, col2, col3 = st.columns(3)
    with col1:
        anchor = st.number_input(
            "Total Investment",
            min_value=0.0,
            value=float(session.total_invest_anchor),
            step=1.0,
            format="%.2f"
        )
        if anchor != session.total_invest_anchor:
            result = session.edit_total_investment(anchor)
            if result:
                st.rerun()
            st.warning(f"Total investment not applied: {result.reason}")
    with col2:
        st.metric("Allocation Total (%)", f"{session.ratio_sum:.2f}")
    with col3:
        fee = st.number_input(
            "Fee (%)",
            value=float(session.fee_percent()),
            step=0.01,
            format="%.2f"
        )
        if fee != session.fee_percent():
            session.set_fee_percent(fee)
            st.rerun()


def show_correlation_table(session):
    """Display the editable correlation matrix."""
    st.header("Correlations")

    before = correlation_frame(session.allocation)
    if before.empty:
        st.info("Add an asset class to edit correlations.")
        return

    edited = st.data_editor(
        before,
        column_config={asset: st.column_config.NumberColumn(
            asset,
            format="%.2f",
            step=0.01
        ) for asset in before.columns},
        use_container_width=True,
        key=f"correlation_editor_{len(before)}"
    )

    results = apply_correlation_edits(session, before, edited)
    _warn_rejections(results)
    if any(result for *_, result in results):
        st.rerun()


def show_asset_controls(session):
    """Display controls for adding and deleting asset classes."""
    st.subheader("Asset Classes")

    col1, col2 = st.columns(2)
    with col1:
        with st.form("append_asset", clear_on_submit=True):
            name = st.text_input("New Asset Class")
            if st.form_submit_button("Add"):
                if not is_valid_asset_name(name):
                    st.error("The name contains characters that cannot be used")
                else:
                    result = session.append_asset(name)
                    if result:
                        st.rerun()
                    st.error(f"Could not add {name}: {result.reason}")
    with col2:
        names = session.allocation.asset_names()
        if names:
            name = st.selectbox("Asset Class to Delete", names)
            if st.button("Delete"):
                session.delete_asset(name)
                st.rerun()


def show_totals(session):
    """Display portfolio totals and an allocation pie chart."""
    st.header("Portfolio")

    totals = session.recompute()

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Investment", f"{totals.total_investment:,.2f}")
    col2.metric("Expected Return (%)", f"{totals.total_return * 100:.2f}")
    col3.metric("Risk (%)", f"{totals.total_risk * 100:.2f}")

    invested = {name: ratio for name, ratio in totals.investment_ratios.items() if ratio > 0}
    if invested:
        fig, ax = plt.subplots(figsize=(8, 6))
        ax.pie(
            list(invested.values()),
            labels=list(invested.keys()),
            autopct='%1.1f%%',
            startangle=90
        )
        ax.axis('equal')
        ax.set_title('Current Allocation')

        st.pyplot(fig)
        plt.close(fig)
