import pandas as pd
import plotly.graph_objects as go
import requests
import streamlit as st

from config import API_BASE_URL

# ========================
# CONFIG
# ========================
BASE_URL = API_BASE_URL
CHART_TYPES = ["bar", "line", "pie", "scatter", "doughnut"]

st.set_page_config(
    page_title="Excel Analytics",
    layout="wide"
)

# ========================
# STATE VARIABLES
# ========================
for key, default in {
    "token": None,
    "user": None,
    "file": None,
    "columns": {},
    "chart": None,
}.items():
    if key not in st.session_state:
        st.session_state[key] = default


def api(method: str, path: str, **kwargs) -> requests.Response:
    headers = kwargs.pop("headers", {})
    if st.session_state.token:
        headers["Authorization"] = f"Bearer {st.session_state.token}"
    return requests.request(method, f"{BASE_URL}{path}", headers=headers, timeout=60, **kwargs)


def show_error(resp: requests.Response):
    try:
        st.error(resp.json().get("error", resp.text))
    except ValueError:
        st.error(resp.text)


def render_chart(chart: dict):
    data = chart["chart_data"]
    title = chart["title"]

    if chart["is_3d"]:
        df = pd.DataFrame(data)
        if df.empty:
            st.info("No points to plot.")
            return
        fig = go.Figure(go.Scatter3d(
            x=df["x"], y=df["y"], z=df["z"], text=df["label"], mode="markers",
            marker={"size": 4, "color": df["z"], "colorscale": "Viridis"},
        ))
    else:
        dataset = data["datasets"][0]
        labels, values = data["labels"], dataset["data"]
        colors = dataset["backgroundColor"]
        kind = chart["chart_type"]
        if kind in ("pie", "doughnut"):
            fig = go.Figure(go.Pie(
                labels=labels, values=values, marker={"colors": colors},
                hole=0.5 if kind == "doughnut" else 0,
            ))
        elif kind == "line":
            fig = go.Figure(go.Scatter(x=labels, y=values, mode="lines+markers", name=dataset["label"]))
        elif kind == "scatter":
            fig = go.Figure(go.Scatter(x=labels, y=values, mode="markers", marker={"color": colors}))
        else:
            fig = go.Figure(go.Bar(x=labels, y=values, marker={"color": colors}, name=dataset["label"]))

    fig.update_layout(title=title)
    st.plotly_chart(fig, use_container_width=True)


st.title("Excel Analytics")

# 1. AUTH
with st.sidebar:
    st.header("Account")
    if st.session_state.user:
        st.write(f"Signed in as **{st.session_state.user['username']}** ({st.session_state.user['role']})")
        if st.button("Log out"):
            api("POST", "/api/logout")
            st.session_state.token = None
            st.session_state.user = None
            st.rerun()
    else:
        mode = st.radio("Mode", ["Login", "Register"], horizontal=True)
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        email = full_name = None
        if mode == "Register":
            email = st.text_input("Email")
            full_name = st.text_input("Full name")

        if st.button(mode):
            if mode == "Login":
                resp = api("POST", "/api/login", json={"username": username, "password": password})
            else:
                resp = api("POST", "/api/register", json={
                    "username": username, "password": password,
                    "email": email, "full_name": full_name,
                })
            if resp.ok:
                body = resp.json()
                st.session_state.token = body["access_token"]
                st.session_state.user = body["user"]
                st.rerun()
            else:
                show_error(resp)

if not st.session_state.user:
    st.info("Log in or register to upload spreadsheets.")
    st.stop()

# 2. FILE UPLOAD
st.header("1. Upload Excel File")

uploaded_file = st.file_uploader("Upload your Excel file", type=["xlsx", "xls"])

if uploaded_file is not None and st.button("Upload & Process File"):
    with st.spinner("Uploading..."):
        resp = api("POST", "/api/upload", files={"file": (uploaded_file.name, uploaded_file.getvalue())})
        if resp.ok:
            data = resp.json()
            st.session_state.file = data["file"]
            st.session_state.columns = data["file"]["columns"]
            st.success(
                f"Uploaded {data['file']['original_name']}: "
                f"{data['summary']['totalSheets']} sheets, {data['summary']['totalRows']} rows"
            )
        else:
            show_error(resp)

files_resp = api("GET", "/api/files")
my_files = files_resp.json() if files_resp.ok else []
if my_files:
    names = {f"{f['original_name']} (#{f['id']})": f for f in my_files}
    picked = st.selectbox("Or pick a previously uploaded file", list(names))
    if st.button("Use this file"):
        st.session_state.file = names[picked]
        st.session_state.columns = names[picked]["columns"]

if not st.session_state.file:
    st.stop()

file_id = st.session_state.file["id"]

# 3. SHEET PREVIEW + STATS
st.header("2. Preview & Statistical Summary")

sheet_names = [s for s in st.session_state.file["sheets"] if s in st.session_state.columns]
selected_sheet = st.selectbox("Select a sheet", sheet_names)

if selected_sheet and st.button("Load Preview & Stats"):
    with st.spinner(f"Loading preview & stats for {selected_sheet}..."):
        prev_res = api("GET", f"/api/files/{file_id}/sheets/{selected_sheet}/preview", params={"n_rows": 20})
        if prev_res.ok:
            preview = prev_res.json()
            st.subheader("Preview (first 20 rows)")
            columns = [c if c is not None else f"(blank {i})" for i, c in enumerate(preview["columns"])]
            rows = [row + [None] * (len(columns) - len(row)) for row in preview["rows"]]
            st.dataframe(pd.DataFrame(rows, columns=columns), use_container_width=True)
        else:
            show_error(prev_res)

        stats_res = api("GET", f"/api/files/{file_id}/sheets/{selected_sheet}/summary")
        st.subheader("Statistical Summary")
        if not stats_res.ok:
            show_error(stats_res)
        elif "error" in stats_res.json():
            st.warning(stats_res.json()["error"])
        else:
            st.table(pd.DataFrame(stats_res.json()["columnStats"]))

# 4. CHART BUILDER
st.header("3. Build a Chart")

if selected_sheet:
    headers = st.session_state.columns.get(selected_sheet, [])
    col1, col2, col3 = st.columns(3)
    with col1:
        title = st.text_input("Title", value=f"{selected_sheet} chart")
        chart_type = st.selectbox("Chart type", CHART_TYPES)
    with col2:
        x_axis = st.selectbox("X axis", headers)
        y_axis = st.selectbox("Y axis", headers)
    with col3:
        is_3d = st.checkbox("3D chart")
        z_axis = st.selectbox("Z axis (optional)", ["(row index)"] + headers, disabled=not is_3d)
        limit = st.number_input("Row limit", min_value=1, value=1000)

    payload = {
        "file_id": file_id,
        "title": title,
        "chart_type": chart_type,
        "sheet_name": selected_sheet,
        "x_axis": x_axis,
        "y_axis": y_axis,
        "z_axis": None if z_axis == "(row index)" else z_axis,
        "is_3d": is_3d,
        "limit": int(limit),
    }

    preview_col, save_col = st.columns(2)
    with preview_col:
        if st.button("Preview Chart"):
            resp = api("POST", "/api/charts/preview", json=payload)
            if resp.ok:
                st.session_state.chart = resp.json()
            else:
                show_error(resp)
    with save_col:
        if st.button("Save Chart"):
            resp = api("POST", "/api/charts", json=payload)
            if resp.ok:
                st.session_state.chart = resp.json()
                st.success("Chart saved.")
            else:
                show_error(resp)

    if st.session_state.chart:
        render_chart(st.session_state.chart)

# 5. SAVED CHARTS
st.header("4. My Charts")

charts_resp = api("GET", "/api/charts")
for chart in charts_resp.json() if charts_resp.ok else []:
    with st.expander(f"{chart['title']} ({chart['chart_type']}{', 3D' if chart['is_3d'] else ''})"):
        render_chart(chart)
        if st.button("Delete", key=f"delete_{chart['id']}"):
            api("DELETE", f"/api/charts/{chart['id']}")
            st.rerun()
