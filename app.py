import logging
import os

import streamlit as st

from utils.market_assumptions import build_default_session
from pages.allocation import show_allocation_page

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Configure the Streamlit page
st.set_page_config(
    page_title="Asset Allocation",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="collapsed"
)

# One allocation per browser session
if 'allocation_session' not in st.session_state:
    st.session_state.allocation_session = build_default_session()

if st.sidebar.button("Reset to Defaults"):
    st.session_state.allocation_session = build_default_session()
    st.rerun()

show_allocation_page()
