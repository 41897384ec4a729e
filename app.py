# Wellnest - mood check-ins, personalized wellness goals and trends
import hashlib
import logging
import time

import streamlit as st

from wellnest import (
    AudioPlaybackController,
    CatalogEmptyError,
    CatalogError,
    Config,
    GroqSpeechCapture,
    LocalAudioMedia,
    ManualScheduler,
    MoodStateStore,
    MOOD_OPTIONS,
    PlaybackMode,
    PlaybackState,
    RecommendationEngine,
    RiskLevel,
    SettingsStore,
    UnknownGoalError,
    ValidationError,
    VoiceCaptureBuffer,
    audio_mime,
    compute_metrics,
    configure_logging,
    format_time,
    load_catalog,
    merge_notes,
    recent_moods,
)
from wellnest.dashboard import daily_averages
from wellnest.narration import ensure_track

# ✅ Must be FIRST Streamlit command
st.set_page_config(page_title="🌱 Wellnest", layout="wide")

logger = logging.getLogger("wellnest.app")


# ✅ Configuration
@st.cache_resource
def get_config():
    cfg = Config.from_env()
    if not cfg.groq_api_key:
        try:
            cfg.groq_api_key = st.secrets.get("GROQ_API_KEY")
        except Exception:
            # no secrets.toml; voice notes stay disabled
            pass
    configure_logging(cfg.log_level)
    return cfg


@st.cache_resource
def get_settings(path):
    return SettingsStore(path)


@st.cache_resource
def get_catalog(path):
    return load_catalog(path)


cfg = get_config()
settings = get_settings(cfg.db_path)

try:
    catalog = get_catalog(cfg.catalog_path)
except CatalogError as e:
    logger.error("Catalog load failed: %s", e)
    st.error(f"🚨 Activity catalog could not be loaded: {e}")
    st.stop()


# ✅ Notifications
def notify(title, description, severity="info"):
    show = {
        "success": st.success,
        "warning": st.warning,
        "error": st.error,
    }.get(severity, st.info)
    show(f"**{title}** {description}")


# ✅ Session objects
if 'moods' not in st.session_state:
    st.session_state.moods = MoodStateStore(settings, notify=notify)
moods = st.session_state.moods

if 'engine' not in st.session_state:
    try:
        st.session_state.engine = RecommendationEngine(catalog, moods, settings, notify=notify)
        st.session_state.engine.select_goal()
    except CatalogEmptyError as e:
        st.error(f"🚨 {e}. Add activities to the catalog and restart.")
        st.stop()
engine = st.session_state.engine

if 'speech' not in st.session_state:
    st.session_state.speech = GroqSpeechCapture(cfg.groq_api_key, cfg.transcribe_model)
    st.session_state.voice_buffer = VoiceCaptureBuffer(st.session_state.speech)
speech = st.session_state.speech
voice_buffer = st.session_state.voice_buffer

st.session_state.setdefault('players', {})
st.session_state.setdefault('last_clip', None)


# -------------------- audio helpers --------------------
def get_player(activity):
    """Playback session for the visible activity; other sessions are closed."""
    players = st.session_state.players
    for other_id in [k for k in players if k != activity.id]:
        players.pop(other_id)[0].close()
    if activity.id not in players:
        scheduler = ManualScheduler()
        path = ensure_track(activity, cfg.audio_dir, cfg.tts_lang, cfg.narration_enabled)
        media = LocalAudioMedia(path, scheduler, duration_hint=activity.duration_seconds,
                                tick_seconds=cfg.tick_seconds)
        controller = AudioPlaybackController(activity.audio, media, scheduler,
                                             fallback_cap=cfg.fallback_cap,
                                             tick_seconds=cfg.tick_seconds,
                                             volume=cfg.default_volume)
        players[activity.id] = (controller, scheduler, path)
    return players[activity.id]


def _time_caption(controller):
    label = f"{format_time(controller.position)} / {format_time(controller.display_duration)}"
    if controller.mode is PlaybackMode.SIMULATED:
        label += " · simulated"
    return label


# ✅ Streamlit UI
st.title("🌱 Wellnest: Your Daily Wellness Companion")

tabs = st.tabs(["📝 Check-in", "🎯 Goals", "🎧 Activities", "📊 Dashboard"])

# 📝 CHECK-IN TAB
with tabs[0]:
    st.subheader("📝 Daily Mood Check-in")
    st.caption("How are you feeling today? Take a moment to reflect on your current state of mind.")

    labels = {opt.value: f"{opt.emoji} {opt.label}" for opt in MOOD_OPTIONS}
    selected = st.radio("Select your mood", list(labels), format_func=labels.get,
                        index=None, horizontal=True)
    notes = st.text_area("Additional thoughts (optional)",
                         placeholder="Share anything on your mind - challenges, wins, or thoughts about your day...",
                         height=120)

    if voice_buffer.available:
        clip = st.audio_input("🎙️ Record a voice note (optional)")
        if clip is not None:
            data = clip.read()
            digest = hashlib.sha1(data).hexdigest()
            if digest != st.session_state.last_clip:
                st.session_state.last_clip = digest
                speech.start()
                text = speech.feed(data)
                speech.stop()
                if text:
                    st.success(f"🗣️ Transcribed: {text}")
        if voice_buffer:
            st.info(f"🗣️ Voice note so far: {voice_buffer.commit()}")
            if st.button("Discard voice note"):
                voice_buffer.clear()
    elif not st.session_state.get('voice_notice_shown'):
        st.session_state.voice_notice_shown = True
        st.info("🎙️ Voice notes are unavailable (no GROQ_API_KEY). You can still type your notes.")

    if st.button("Save Check-in"):
        spoken = voice_buffer.commit()
        try:
            moods.set_mood(selected, merge_notes(notes, spoken), "voice" if spoken else "manual")
        except ValidationError as e:
            st.error(f"❌ {e}")
        else:
            voice_buffer.clear()
            engine.select_goal()

# 🎯 GOALS TAB
with tabs[1]:
    st.subheader("🎯 Daily Wellness Goals")
    goal_box = st.container()

    col1, col2 = st.columns([1, 1])
    with col1:
        if st.button("✅ Complete Goal") and engine.current_goal:
            try:
                engine.mark_complete(engine.current_goal.id)
            except UnknownGoalError as e:
                st.error(f"❌ {e}")
    with col2:
        if st.button("🔄 New Goal"):
            engine.select_goal()

    # filled after the buttons so a completion shows the next goal right away
    with goal_box:
        st.caption(f"Personalized goals based on how you're feeling today {labels[moods.get_current_mood()]}")
        goal = engine.current_goal
        if goal:
            st.markdown(f"### {goal.title}")
            st.write(goal.description)
            st.markdown(f"`{goal.category}` · `{goal.duration}` · `{goal.difficulty.value}`")
            if goal.has_audio:
                st.caption("🎧 This goal has a guided track in the Activities tab.")

    done = engine.completed_today()
    all_time = len(engine.completed_all_time())
    m1, m2 = st.columns(2)
    with m1:
        st.metric("Goals completed today 🎉", done)
    with m2:
        st.metric("Goals completed all time 🏆", all_time)

# 🎧 ACTIVITIES TAB
playing_controller = None
with tabs[2]:
    st.subheader("🎧 Guided Activities")
    audio_activities = [a for a in catalog if a.has_audio]
    if not audio_activities:
        st.info("No guided audio activities in this catalog.")
    else:
        default = engine.current_goal if engine.current_goal in audio_activities else audio_activities[0]
        activity = st.selectbox("Choose an activity", audio_activities,
                                index=audio_activities.index(default),
                                format_func=lambda a: f"{a.title} ({a.duration})")
        st.info(activity.description)
        controller, scheduler, track = get_player(activity)

        c1, c2, c3 = st.columns([1, 1, 2])
        with c1:
            if controller.playing:
                if st.button("⏸️ Pause"):
                    controller.pause()
            elif st.button("▶️ Play"):
                controller.play()
        with c2:
            if st.button("🔄 Reset"):
                controller.reset()
        real_track = track is not None and track.is_file()
        with c3:
            if real_track:
                st.caption("🔊 Use the player's own volume control.")
            else:
                vol = st.slider("🔊 Volume (this session)", 0.0, 1.0, controller.volume, 0.1)
                controller.set_volume(vol)

        if controller.playing and controller.mode is PlaybackMode.REAL and real_track:
            st.audio(str(track), format=audio_mime(track), autoplay=True)

        prog = st.progress(int(controller.progress))
        caption = st.empty()
        caption.caption(_time_caption(controller))
        done_box = st.empty()
        if controller.playing:
            playing_controller = (controller, scheduler, prog, caption, done_box)

# 📊 DASHBOARD TAB
with tabs[3]:
    st.subheader("📊 Your Wellness Dashboard")
    history = moods.get_history()
    metrics = compute_metrics(history)

    c1, c2, c3, c4 = st.columns(4)
    with c1:
        if metrics.insufficient_data:
            st.metric("Weekly Average", "N/A")
            st.caption("Not enough check-ins this week yet")
        else:
            st.metric("Weekly Average", f"{metrics.weekly_average:.1f}/5")
            st.progress(metrics.weekly_average / 5)
    with c2:
        st.metric("Check-in Streak", f"{metrics.streak_days} days")
    with c3:
        st.metric("Total Check-ins", metrics.total_check_ins)
        st.caption("This month 📊")
    with c4:
        st.metric("Risk Level", metrics.risk_level.value.capitalize())
        st.caption("Based on recent patterns 🧠")

    if metrics.risk_level is RiskLevel.HIGH:
        st.warning("🌷 I noticed you've been feeling quite low recently. "
                   "Would you like to try a calming meditation or a grounding exercise?")
        st.info("**Need more support?** If you're experiencing persistent feelings of sadness or anxiety, "
                "consider speaking with a counselor or mental health professional.")

    st.divider()
    st.markdown("### Recent Mood History")
    rows = recent_moods(history)
    if not rows:
        st.info("No check-ins yet. Your mood history will show up here.")
    for row in rows:
        a, b = st.columns([1, 2])
        with a:
            st.markdown(f"{row.emoji} **{row.label}**")
        with b:
            st.progress(row.mood / 5, text=f"{row.mood}/5")

    trend = daily_averages(history)
    if any(avg is not None for _, avg in trend):
        st.markdown("### 📈 Mood trend (last 14 days)")
        st.line_chart({"Mood": [avg for _, avg in trend]})


# -------------------- playback loop --------------------
# Runs last so every tab is rendered first. Any button press reruns the
# script and interrupts this loop; the controller keeps its state.
if playing_controller:
    controller, scheduler, prog, caption, done_box = playing_controller
    while controller.playing:
        time.sleep(cfg.tick_seconds)
        scheduler.advance(cfg.tick_seconds)
        prog.progress(int(controller.progress))
        caption.caption(_time_caption(controller))
    if controller.state is PlaybackState.ENDED:
        done_box.success("✔️ Session complete. Well done!")
