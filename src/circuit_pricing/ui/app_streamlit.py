"""
Streamlit viewer for carrier quote pricing.

Features:
- Circuit quote picker with admin/agent view toggle
- Carrier cards with display price, before-extras figure and ticked options
- Category markup table
- Resolution trace per carrier
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from circuit_pricing.config.settings import get_settings
from circuit_pricing.data.store import QuoteStore
from circuit_pricing.engine import PricingEngine, Viewer
from circuit_pricing.engine.site_survey import site_survey_status


st.set_page_config(
    page_title="Circuit Pricing",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_store():
    """Get cached store instance."""
    return QuoteStore(get_settings())


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    return PricingEngine(store=get_store())


try:
    store = get_store()
    engine = get_engine()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()


def format_price(price: float) -> str:
    return f"${price:,.2f}" if price > 0 else "Pending"


# ============================================================================
# SIDEBAR: Viewer Context
# ============================================================================
with st.sidebar:
    st.header("Viewer")

    with st.container(border=True):
        viewer_email = st.text_input("Viewer e-mail", value="", key="viewer_email")
        profile_admin = store.is_admin(viewer_email)
        is_admin = st.toggle("Admin view (raw cost)", value=profile_admin)
        st.caption("Admin" if is_admin else "Agent (marked-up prices)")

    st.divider()

    if engine.categories:
        st.success(f"**{len(engine.categories)} Categories Active**")
    else:
        st.warning("No categories loaded: agents see cost")

    if st.button("Reload data"):
        engine.reload_data()
        st.rerun()


st.title("Circuit Pricing")
st.caption(f"v1.0 | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2 = st.tabs(["Carrier Quotes", "Categories"])


# ============================================================================
# TAB 1: CARRIER QUOTES
# ============================================================================
with tab1:
    circuit_quotes = store.circuit_quotes
    if circuit_quotes.empty:
        st.info("No circuit quotes found.")
    else:
        labels = [
            f"{row['id']} | {row['client_name']} | {row['location']}"
            for _, row in circuit_quotes.iterrows()
        ]
        selected = st.selectbox("Circuit quote", options=labels)
        circuit_quote_id = selected.split(" | ")[0]

        viewer = Viewer(is_admin=is_admin, email=viewer_email or None)
        carriers = store.list_carrier_quotes(circuit_quote_id)

        if not carriers:
            st.info("No carrier quotes yet.")

        for quote, breakdown in zip(carriers, engine.price_many(carriers, viewer)):
            with st.container(border=True):
                c1, c2 = st.columns([2, 1])
                with c1:
                    st.markdown(f"**{quote.carrier}**  \n{quote.type} · {quote.speed}")
                    if quote.term:
                        st.caption(quote.term)
                    if breakdown.ticked_options:
                        st.caption(" · ".join(breakdown.ticked_options))
                    status = site_survey_status(quote)
                    if status.text:
                        st.markdown(f":orange[{status.text}]")
                with c2:
                    if quote.no_service:
                        st.metric("Monthly", "No Service")
                    else:
                        st.metric("Monthly", format_price(breakdown.display_price))
                        if breakdown.has_add_on_delta and breakdown.base_price_without_add_ons > 0:
                            st.caption(f"Before extras: {format_price(breakdown.base_price_without_add_ons)}")

                with st.expander("Resolution Details"):
                    st.text(breakdown.get_trace_text())


# ============================================================================
# TAB 2: CATEGORIES
# ============================================================================
with tab2:
    st.subheader("Category Markup Table")
    st.caption("Categories are matched in this order; the first match wins.")
    if engine.categories:
        st.dataframe(
            pd.DataFrame([
                {
                    'Name': c.name,
                    'Type': c.type or '',
                    'Minimum Markup %': c.minimum_markup,
                }
                for c in engine.categories
            ]),
            use_container_width=True,
            hide_index=True
        )
    else:
        st.info("No active categories.")
