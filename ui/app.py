import streamlit as st
import requests
from datetime import date

# Page configuration
st.set_page_config(
    page_title="CropDoctor - Crop disease triage",
    page_icon="🌿",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .main-title {
        font-size: 2.5rem;
        font-weight: 700;
        color: #2e7d32;
        text-align: center;
        margin-bottom: 0.5rem;
    }

    .subtitle {
        text-align: center;
        color: #666;
        font-size: 1.1rem;
        margin-bottom: 2rem;
    }

    .top-choice {
        border-left: 4px solid #4caf50;
        padding-left: 0.75rem;
    }
</style>
""", unsafe_allow_html=True)

st.markdown('<h1 class="main-title">🌿 CropDoctor</h1>', unsafe_allow_html=True)
st.markdown('<p class="subtitle">Scan a crop, review the diagnosis and plan treatments</p>', unsafe_allow_html=True)

# Sidebar configuration
with st.sidebar:
    st.header("⚙️ Settings")

    backend_url = st.text_input(
        "Backend URL",
        value="http://127.0.0.1:8000",
        help="🔗 Base address of the FastAPI server",
    )
    api = backend_url.rstrip("/") + "/v1/workflow"

    try:
        state = requests.get(f"{api}/state", timeout=10).json()
    except requests.RequestException as e:
        st.error(f"❌ Backend unreachable: {e}")
        st.stop()

    offline = st.toggle(
        "Offline mode",
        value=state["offline"],
        help="📴 Offline: local processing. Online: cloud processing and external research",
    )
    if offline != state["offline"]:
        state = requests.post(f"{api}/mode", json={"offline": offline}, timeout=10).json()

    st.divider()
    page = st.radio(
        "Page",
        ["capture", "results", "treatments", "monitor"],
        index=["capture", "results", "treatments", "monitor"].index(state["phase"])
        if state["phase"] != "analyzing" else 0,
        format_func=lambda p: p.title(),
    )


def navigate(target: str) -> dict:
    res = requests.post(f"{api}/navigate", json={"page": target}, timeout=10)
    return res.json()


view = navigate(page) if page != state["phase"] else requests.get(f"{api}/view", timeout=10).json()

if view.get("status_message"):
    st.caption(f"📡 {view['status_message']}")

if view["empty"]:
    st.info(f"**{view['title']}** - {view['message']}")
    st.stop()

# ─────────────────────────────────────────────────────
# Capture
# ─────────────────────────────────────────────────────
if view["page"] == "capture":
    if view.get("message"):
        st.error(f"❌ {view['message']}")

    photo = st.camera_input("📸 Take a photo") or st.file_uploader(
        "📤 Or upload an image", type=["png", "jpg", "jpeg", "webp"]
    )
    if photo and st.button("🔬 Analyze", use_container_width=True):
        with st.spinner("⏳ Analyzing image..."):
            res = requests.post(
                f"{api}/capture",
                params={"wait": "true"},
                files={"image": (photo.name, photo.getvalue(), photo.type or "image/jpeg")},
                timeout=60,
            )
        if res.status_code >= 400:
            st.error(f"❌ {res.json().get('detail')}")
        else:
            st.rerun()

# ─────────────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────────────
elif view["page"] == "results":
    d = view["diagnosis"]
    st.subheader(f"🔍 {d['name']} ({d['crop']})")
    col1, col2 = st.columns(2)
    col1.metric("Confidence", f"{d['confidence']}%")
    col2.metric("Severity", d["severity"])
    st.write(d["description"])
    st.markdown("**Key symptoms:**")
    for s in d["symptoms"]:
        st.markdown(f"- {s}")

    report = requests.get(f"{api}/report", timeout=10)
    st.download_button("📄 Export report", report.text, file_name=f"diagnosis-{d['id']}.txt")

    if not view["offline"] and st.button("🌐 Search external sources"):
        for r in requests.get(f"{api}/research", timeout=30).json():
            st.markdown(f"**{r['title']}** - {r['source']} ({r['relevance']}% match)  \n{r['summary']}")

# ─────────────────────────────────────────────────────
# Treatments
# ─────────────────────────────────────────────────────
elif view["page"] == "treatments":
    field_size = st.text_input("🌾 Field size (acres)", value=view["field_size"])
    if field_size != view["field_size"]:
        requests.post(f"{api}/field-size", json={"field_size": field_size}, timeout=10)
        st.rerun()

    for row in view["treatments"]:
        t = row["treatment"]
        label = f"{row['rank']}. {t['name']} ({t['category']})" + (" ⭐ Top choice" if row["top_choice"] else "")
        with st.expander(label, expanded=row["top_choice"]):
            st.progress(row["effectiveness_score"] / 100, text=f"Effectiveness: {t['effectiveness']}")
            st.write(f"**Application:** {t['application']}")
            st.write(f"**Instructions:** {t['instructions']}")
            st.write(f"**Estimated cost:** {row['estimate']['display']}")

            c1, c2 = st.columns(2)
            if c1.checkbox("Compare", value=row["compared"], key=f"cmp-{t['id']}") != row["compared"]:
                requests.post(f"{api}/compare/{t['id']}", timeout=10)
                st.rerun()

            start = c2.date_input("Start date", value=date.today(), min_value=date.today(), key=f"start-{t['id']}")
            if c2.button("📅 Schedule", key=f"sched-{t['id']}"):
                res = requests.post(
                    f"{api}/schedule",
                    json={"treatment_id": t["id"], "start_date": start.isoformat()},
                    timeout=10,
                )
                if res.status_code >= 400:
                    st.error(f"❌ {res.json().get('detail')}")
                else:
                    st.success(f"✅ Treatment scheduled! Next application: {res.json()['next_application_date']}")

    if view["comparison"]:
        st.subheader("⚖️ Treatment comparison")
        st.table([
            {"Treatment": c["treatment_name"], "Cost/acre": c["cost_per_acre"], "Total": c["display"]}
            for c in view["comparison"]
        ])

# ─────────────────────────────────────────────────────
# Monitor
# ─────────────────────────────────────────────────────
elif view["page"] == "monitor":
    d = view["diagnosis"]
    st.subheader(f"📈 Monitor • {d['crop']}")

    if view["next_due"]:
        nd = view["next_due"]
        st.info(f"⏰ Next application: **{nd['treatment_name']}** on {nd['next_application_date']}")

    if view["schedule"]:
        st.markdown("### Scheduled treatments")
        st.table([
            {
                "Treatment": s["treatment_name"],
                "Started": s["start_date"],
                "Frequency": s["frequency"],
                "Next application": s["next_application_date"],
            }
            for s in view["schedule"]
        ])

    if view["timeline"]:
        st.markdown("### Timeline")
        for e in view["timeline"]:
            icon = "✅" if e["kind"] == "started" else "🗓️"
            st.write(f"{icon} {e['event_date']} - {e['treatment_name']} ({e['kind'].replace('_', ' ')})")

    st.markdown("### Progress photos")
    photo = st.file_uploader("📤 Upload a follow-up photo", type=["png", "jpg", "jpeg", "webp"])
    if photo and st.button("Add photo"):
        requests.post(
            f"{api}/progress-photos",
            files={"image": (photo.name, photo.getvalue(), photo.type or "image/jpeg")},
            timeout=30,
        )
        st.rerun()
    progress = view["progress"]
    if progress["count"]:
        st.caption(
            f"{progress['count']} photo(s): first {progress['first']['filename']}, "
            f"latest {progress['latest']['filename']}"
        )
