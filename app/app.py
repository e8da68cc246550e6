# app.py
import os
import numpy as np
import streamlit as st
from PIL import Image
import sys
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from expression.config import MIN_DETECTION_CONFIDENCE, THRESHOLDS_PATH, load_thresholds, setup_logging
from expression.core import ExpressionAnalyzer
from expression.landmarks import LandmarkDetector
from expression.models import Detection

setup_logging()

# ---------- Page + CSS ----------
st.set_page_config(page_title="Facial Expression Rater", page_icon="😁", layout="centered")
st.title("Facial Expression Rater")
st.caption("Camera or image upload → facial landmarks → expression labels with confidence.")

st.markdown("""
<style>
.det-row { font-size: 1.2rem; display: flex; gap: 12px; }
.det-emoji { font-size: 1.6rem; }
.det-conf { margin-left: auto; opacity: 0.8; }
.small-note { opacity: 0.8; font-size: 0.95rem; }
</style>
""", unsafe_allow_html=True)

# ---------- State ----------
# one FaceMesh per browser session; Streamlit runs sessions on separate threads
if "analyzer" not in st.session_state:
    st.session_state["analyzer"] = ExpressionAnalyzer(
        thresholds=load_thresholds(),
        detector=LandmarkDetector(min_detection_confidence=MIN_DETECTION_CONFIDENCE),
    )
if "last_detections" not in st.session_state:
    st.session_state["last_detections"] = None
if "last_input" not in st.session_state:
    st.session_state["last_input"] = None

analyzer: ExpressionAnalyzer = st.session_state["analyzer"]

# ---------- UI helpers ----------
def show_detections(detections: list[Detection]) -> None:
    if not detections:
        st.info("No expressions detected. Try better lighting/framing.")
        return
    for d in detections:
        st.markdown(
            f'<div class="det-row"><span class="det-emoji">{d.emoji}</span>'
            f'<span>{d.name}</span><span class="det-conf">{d.confidence * 100:.0f}%</span></div>',
            unsafe_allow_html=True,
        )
    with st.expander("Details (JSON preview)"):
        st.json([d.__dict__ for d in detections])

def analyze(pil_img: Image.Image, key: str) -> None:
    st.session_state["last_detections"] = analyzer.analyze_image(np.array(pil_img.convert("RGB")))
    st.session_state["last_input"] = key

def input_key(uploaded) -> str:
    return getattr(uploaded, "file_id", None) or f"{uploaded.name}:{uploaded.size}"

# ---------- Sidebar ----------
with st.sidebar:
    st.header("Settings")
    st.markdown(
        f"<div class='small-note'>Thresholds file: <code>{THRESHOLDS_PATH}</code><br>"
        f"Detection confidence: <b>{MIN_DETECTION_CONFIDENCE}</b></div>",
        unsafe_allow_html=True,
    )
    if st.button("🗑️ Clear results"):
        st.session_state["last_detections"] = None

# ---------- Modes ----------
mode = st.radio("Choose input mode", ["📷 Camera", "🖼️ Image upload"], horizontal=True)

if mode.startswith("📷"):
    img_input = st.camera_input("Camera (allow access, then take a snapshot)")
    # a rerun keeps the same snapshot; analyze only new ones
    if img_input is not None and input_key(img_input) != st.session_state["last_input"]:
        analyze(Image.open(img_input), input_key(img_input))
else:
    file = st.file_uploader("Upload an image", type=["jpg", "jpeg", "png"])
    if file is not None:
        pil = Image.open(file).convert("RGB")
        st.image(pil, caption="Uploaded image", use_container_width=True)
        if st.button("😄 Analyze Expressions"):
            analyze(pil, input_key(file))

# ---------- Results ----------
if st.session_state["last_detections"] is not None:
    st.subheader("Expressions")
    show_detections(st.session_state["last_detections"])
