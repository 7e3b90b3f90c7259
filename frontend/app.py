import json
import os
import time

import pandas as pd
import requests
import streamlit as st
import streamlit.components.v1 as components

from astro_baba.seeded import SIGNS

API = os.getenv("API_URL", "http://127.0.0.1:8000")
SHARED_SECRET = os.getenv("ASTRO_SHARED_SECRET", "").strip()
PACKAGES = ["daily", "weekly", "gemstone", "mantra", "yearly", "persona"]
WINDOW_LABELS = {
    "rahuKaal": "Rahu Kaal",
    "yamaganda": "Yamaganda",
    "gulikaKaal": "Gulika Kaal",
    "abhijitMuhurat": "Abhijit Muhurat",
}

st.set_page_config(page_title="Astro-Baba Dashboard", layout="wide")
st.title("Astro-Baba Dashboard")


def _headers():
    return {"x-api-key": SHARED_SECRET} if SHARED_SECRET else {}


def api_get(path, params=None, timeout=60):
    url = f"{API}{path}"
    r = requests.get(url, params=params or {}, headers=_headers(), timeout=timeout)
    r.raise_for_status()
    return r


def api_post(path, json_data=None, params=None, timeout=60):
    url = f"{API}{path}"
    r = requests.post(url, json=json_data, params=params or {}, headers=_headers(), timeout=timeout)
    r.raise_for_status()
    return r


def show_error(e: Exception, context: str = ""):
    detail = ""
    response = getattr(e, "response", None)
    if response is not None:
        try:
            detail = response.json().get("error", "")
        except ValueError:
            detail = response.text[:300]
    msg = f"{context}\n{detail or str(e)}".strip()
    st.error(msg)
    with st.expander("Details"):
        st.exception(e)


def copy_to_clipboard(text: str, button_label: str = "Copy", key: str = "copy_btn"):
    if st.button(button_label, key=key):
        safe = json.dumps(text)
        components.html(f"<script>navigator.clipboard.writeText({safe});</script>", height=0, width=0)
        st.success("Copied")


# ---- sidebar inputs ----
st.sidebar.header("Inputs (IST)")

if "inputs" not in st.session_state:
    st.session_state.inputs = dict(sign="aries", lang="en", name="", phone="", dob="", occupation="",
                                   app_name="Astro-Baba", logo_url="")

with st.sidebar.form("input_form"):
    current = st.session_state.inputs
    sign = st.selectbox("Sign", SIGNS, index=SIGNS.index(current["sign"]), format_func=str.capitalize)
    lang = st.selectbox("Language", ["en", "hi"], index=0 if current["lang"] == "en" else 1)
    name = st.text_input("Name", current["name"])
    phone = st.text_input("Phone", current["phone"])
    dob = st.text_input("Date of birth (YYYY-MM-DD)", current["dob"])
    occupation = st.text_input("Occupation", current["occupation"])
    app_name = st.text_input("App name (PDF brand)", current["app_name"])
    logo_url = st.text_input("Logo URL", current["logo_url"])

    if st.form_submit_button("Apply Inputs"):
        st.session_state.inputs.update(sign=sign, lang=lang, name=name.strip(), phone=phone.strip(),
                                       dob=dob.strip(), occupation=occupation.strip(),
                                       app_name=app_name.strip(), logo_url=logo_url.strip())
        st.success("Inputs updated")

inputs = st.session_state.inputs
user = {k: inputs[k] for k in ("name", "phone", "dob", "occupation") if inputs[k]}
brand = {"appName": inputs["app_name"] or "Astro-Baba"}
if inputs["logo_url"]:
    brand["logoUrl"] = inputs["logo_url"]

# ---- state ----
for key in ("health", "daily", "weekly", "yearly", "pdf_bytes", "pdf_name"):
    if key not in st.session_state:
        st.session_state[key] = None

# ---- actions ----
c1, c2, c3, c4 = st.columns([1, 1, 1, 2])

with c1:
    if st.button("Health Check"):
        try:
            with st.spinner("Checking backend..."):
                st.session_state.health = api_get("/health", timeout=8).json()
            st.success("Backend OK")
        except Exception as e:
            show_error(e, "Health error")

with c2:
    if st.button("Daily + Weekly"):
        prog = st.progress(0, text="Starting...")
        try:
            with st.spinner("Fetching horoscopes..."):
                prog.progress(20, text="Calling /daily")
                st.session_state.daily = api_post(
                    "/daily", json_data={"sign": inputs["sign"], "lang": inputs["lang"], "user": user}, timeout=45
                ).json()
                prog.progress(60, text="Calling /weekly")
                st.session_state.weekly = api_get(
                    "/weekly", params={"sign": inputs["sign"], "lang": inputs["lang"]}, timeout=60
                ).json()
                prog.progress(100, text="Done")
            st.success("Horoscopes OK")
        except Exception as e:
            prog.empty()
            show_error(e, "Horoscope error")

with c3:
    if st.button("Yearly Roadmap"):
        try:
            with st.spinner("Building roadmap..."):
                st.session_state.yearly = api_get(
                    "/yearly",
                    params={"sign": inputs["sign"], "lang": inputs["lang"], "persona": inputs["occupation"]},
                    timeout=30,
                ).json()
            st.success("Roadmap OK")
        except Exception as e:
            show_error(e, "Yearly error")

with c4:
    package = st.selectbox("PDF package", PACKAGES, key="pdf_package")
    if st.button("Generate PDF"):
        prog = st.progress(0, text="Starting PDF...")
        try:
            with st.spinner("Building PDF..."):
                payload = {"sign": inputs["sign"], "lang": inputs["lang"], "user": user, "brand": brand,
                           "package": package, "persona": inputs["occupation"] or None}
                prog.progress(30, text="Calling /report/generate")
                r = api_post("/report/generate", json_data=payload, timeout=180)
                st.session_state.pdf_bytes = r.content
                st.session_state.pdf_name = f"astro_baba_{package}_{inputs['sign']}_{int(time.time())}.pdf"
                prog.progress(100, text="Done")
            st.success("PDF generated")
        except Exception as e:
            prog.empty()
            show_error(e, "PDF error")

st.divider()

if st.session_state.pdf_bytes:
    st.download_button("Download PDF", data=st.session_state.pdf_bytes,
                       file_name=st.session_state.pdf_name or "astro_baba_report.pdf", mime="application/pdf")
else:
    st.info("PDF not generated yet.")

tabs = st.tabs(["Daily", "Weekly", "Yearly", "Raw JSON"])

with tabs[0]:
    daily = st.session_state.daily
    if not isinstance(daily, dict):
        st.info("Fetch Daily + Weekly first.")
    else:
        rich = daily.get("rich", {})
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Date (IST)", daily.get("date", "—"))
        m2.metric("Lucky Color", rich.get("luckyColor", "—"))
        m3.metric("Lucky Number", str(rich.get("luckyNumber", "—")))
        m4.metric("Mood", rich.get("mood", "—"))
        vedic = daily.get("vedic", {})
        st.dataframe(
            pd.DataFrame([{"Window": WINDOW_LABELS.get(k, k), "Time (IST)": v} for k, v in vedic.items()]),
            use_container_width=True,
            hide_index=True,
        )
        text = daily.get("text", "")
        copy_to_clipboard(text, "Copy Text", key="copy_daily")
        st.markdown(text)

with tabs[1]:
    weekly = st.session_state.weekly
    if not isinstance(weekly, dict):
        st.info("Fetch Daily + Weekly first.")
    else:
        rows = []
        for day in weekly.get("days", []):
            row = {"Date": day.get("date")}
            row.update({WINDOW_LABELS.get(k, k): v for k, v in (day.get("vedic") or {}).items()})
            rows.append(row)
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
        for day in weekly.get("days", []):
            with st.expander(day.get("date", "")):
                st.markdown(day.get("text", ""))

with tabs[2]:
    yearly = st.session_state.yearly
    if not isinstance(yearly, dict):
        st.info("Build the Yearly Roadmap first.")
    else:
        overview = yearly.get("overview", {})
        st.caption(f"persona={yearly.get('persona')} start={yearly.get('start')}")
        st.markdown(f"**{overview.get('zodiac', '')}**")
        st.write(overview.get("summary", ""))
        months = pd.DataFrame([
            {"Month": m.get("label"), "Theme": m.get("title"), "Protection": m.get("protection"),
             "Health": m.get("health")}
            for m in yearly.get("months", [])
        ])
        st.dataframe(months, use_container_width=True, hide_index=True)

with tabs[3]:
    for key in ("health", "daily", "weekly", "yearly"):
        if isinstance(st.session_state[key], dict):
            st.markdown(f"**{key}**")
            st.json(st.session_state[key])
