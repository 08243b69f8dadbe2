# =============================================================================
# inventory_core/ui/streamlit_presenter.py
# Streamlit Rendering of Loading State and Sync Notifications
# =============================================================================

import streamlit as st


class StreamlitPresenter:
    """
    Presenter that renders into the running Streamlit page.

    Blocking loads occupy a placeholder until hide_loading(); non-blocking
    loads and notifications are shown as toasts.
    """

    def __init__(self):
        self._placeholder = None

    def show_loading(self, message: str, delay: float = 0.3, blocking: bool = True) -> None:
        # Streamlit reruns the script on interaction, so delay has no effect here
        if not blocking:
            st.toast(message or "Please wait...")
            return
        if self._placeholder is None:
            self._placeholder = st.empty()
        self._placeholder.info(message or "Please wait...")

    def hide_loading(self) -> None:
        if self._placeholder is not None:
            self._placeholder.empty()
            self._placeholder = None

    def toast(self, message: str, timeout: float = 4.0) -> None:
        st.toast(message)
