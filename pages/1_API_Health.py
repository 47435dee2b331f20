import streamlit as st

from usdcad.api.prices import PriceClient, TransportError
from usdcad.config import load_settings

st.title("🩺 API Health")
settings = load_settings(st.secrets)
client = PriceClient(settings.client_config())

st.caption(f"GET {settings.api_base_url}/health")

if st.button("Check now") or "health_checked" not in st.session_state:
    st.session_state["health_checked"] = True
    try:
        health = client.fetch_health()
    except TransportError as e:
        st.error(f"API unreachable: {e}")
    else:
        status = health["status"]
        if status.upper() == "UP":
            st.success(f"Status: {status}")
        else:
            st.warning(f"Status: {status}")
