# app.py
import datetime as dt

import pandas as pd
import streamlit as st

from exam_ga.assembler import assemble_schedule, group_by_date, section_frames
from exam_ga.config import GAConfig
from exam_ga.data_loader import SchedulingRequest
from exam_ga.engine import solve
from exam_ga.errors import SchedulingError

# --- CONFIGURACIÓN DE PÁGINA ---
st.set_page_config(page_title="Horario de Exámenes", layout="wide", initial_sidebar_state="expanded")


def _lines(text: str):
    return [line.strip() for line in text.splitlines() if line.strip()]


def sidebar_config() -> GAConfig:
    with st.sidebar:
        st.title("🧬 Parámetros del AG")
        st.markdown("---")
        population_size = st.number_input("Tamaño de población", 10, 500, 100, step=10)
        max_generations = st.number_input("Generaciones máximas", 10, 2000, 200, step=10)
        stall_limit = st.number_input("Generaciones sin mejora", 5, 500, 40, step=5)
        elite_size = st.number_input("Élite", 1, 10, 2)
        mutation_rate = st.slider("Mutación por gen", 0.0, 0.5, 0.05, step=0.01)
        selection = st.selectbox("Selección", ["tournament", "roulette"])
        slot_minutes = st.number_input("Duración del bloque (min)", 30, 240, 90, step=15)
        fixed_seed = st.checkbox("Semilla fija", value=False)
        seed = st.number_input("Semilla", 0, 10_000, 0, disabled=not fixed_seed)
    return GAConfig(
        population_size=int(population_size),
        max_generations=int(max_generations),
        stall_limit=int(stall_limit),
        elite_size=int(elite_size),
        mutation_rate=float(mutation_rate),
        selection=selection,
        slot_minutes=int(slot_minutes),
        seed=int(seed) if fixed_seed else None,
    )


def main():
    cfg = sidebar_config()
    st.header("📅 Generador de Horario de Exámenes")

    col_courses, col_sections, col_rooms = st.columns(3)
    with col_courses:
        courses = st.text_area("Cursos (uno por línea)", height=160)
    with col_sections:
        sections = st.text_area("Secciones (una por línea)", height=160)
    with col_rooms:
        rooms = st.text_area("Aulas (una por línea)", height=160)

    c1, c2, c3, c4 = st.columns(4)
    today = dt.date.today()
    start_date = c1.date_input("Fecha inicial", today)
    end_date = c2.date_input("Fecha final", today + dt.timedelta(days=6))
    start_time = c3.time_input("Hora inicial", dt.time(7, 0))
    end_time = c4.time_input("Hora final", dt.time(20, 0))

    if st.button("🚀 Generar Horario"):
        request = SchedulingRequest(
            courses=_lines(courses),
            sections=_lines(sections),
            rooms=_lines(rooms),
            start_date=start_date,
            end_date=end_date,
            start_time=start_time,
            end_time=end_time,
        )
        try:
            with st.spinner("Evolucionando población..."):
                model, result = solve(request, cfg)
        except SchedulingError as e:
            st.error(f"Solicitud inválida: {e}")
            return
        st.session_state.response = assemble_schedule(result, model)
        st.session_state.history = result.history

    response = st.session_state.get("response")
    if not response:
        return

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Fitness", response["fitness_score"])
    m2.metric("Generación", response["generation"])
    m3.metric("Sin asignar", response["unassigned_courses"])
    m4.metric("Choques", response["violations"])
    if response["unassigned_courses"] or response["violations"]:
        st.warning("No todo cabe sin choques: amplíe el rango de fechas o agregue aulas.")

    tab_sections, tab_dates, tab_history = st.tabs(["Por sección", "Por fecha", "Evolución"])
    with tab_sections:
        for section, exams in section_frames(response).items():
            st.subheader(f"Sección: {section}")
            if exams.empty:
                st.info("Sin exámenes asignados.")
            st.dataframe(exams, use_container_width=True, hide_index=True)
    with tab_dates:
        st.json(group_by_date(response))
    with tab_history:
        hist = pd.DataFrame(st.session_state.get("history", []))
        if not hist.empty:
            st.line_chart(hist.set_index("gen")[["best_fitness", "avg_fitness", "best_ever"]])


main()
