"""Condominium Parking Lottery — Streamlit entry point."""

import streamlit as st
import sys
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from components.sidebar import render_sidebar
from config.logging_config import setup_logger
from data.session_store import initialize_session_state
from tabs import tab_data, tab_draw, tab_results


@st.cache_resource
def _init_logging():
    return setup_logger(name="", log_file=os.environ.get("PARKING_LOTTERY_LOG_FILE"))


def main():
    st.set_page_config(
        page_title="Parking Lottery",
        page_icon="🅿️",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    _init_logging()
    initialize_session_state()
    sidebar_state = render_sidebar()

    tab1, tab2, tab3 = st.tabs([
        "📁 Data",
        "🎲 Draw",
        "📋 Results",
    ])

    with tab1:
        tab_data.render(sidebar_state)
    with tab2:
        tab_draw.render(sidebar_state)
    with tab3:
        tab_results.render(sidebar_state)


if __name__ == "__main__":
    main()
