from functools import lru_cache
from typing import Any, Dict

from fastapi import Body, Depends, FastAPI, HTTPException
from fastapi.responses import HTMLResponse

from errors import DomainError, ErrorCode, RenderError
from form import CreateEventForm
from logging_config import setup_logging
from models import Event
from preview import PreviewFormat, page_metadata, render_html, render_page, render_preview
from repo_events import EventRepo
from service_events import EventService
from settings import settings

setup_logging(settings.log_level)

app = FastAPI(title="Event Page Backend")

STATUS_FOR = {
    ErrorCode.VALIDATION: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.STORAGE: 500,
    ErrorCode.RENDER: 500,
}


# Routes get the service through Depends so tests can swap in
# `app.dependency_overrides[get_service]` backed by an in-memory store.
@lru_cache
def get_service() -> EventService:
    return EventService(EventRepo())


def _event_json(event: Event) -> Dict[str, Any]:
    return event.model_dump(mode="json", by_alias=True)


def _http_error(error: DomainError) -> HTTPException:
    return HTTPException(
        status_code=STATUS_FOR.get(error.code, 500),
        detail={"code": error.code.value, "message": error.message},
    )


@app.get("/health")
def health(svc: EventService = Depends(get_service)):
    try:
        svc.health_check()
        return {"ok": True}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"DB health check failed: {e}")


@app.post("/events", status_code=201)
def create_event(payload: Dict[str, Any] = Body(...), svc: EventService = Depends(get_service)):
    result = svc.create_event(payload)
    if not result.success:
        raise _http_error(result.error)
    return _event_json(result.data)


@app.get("/events")
def list_events(svc: EventService = Depends(get_service)):
    result = svc.list_events()
    if not result.success:
        raise _http_error(result.error)
    return [_event_json(e) for e in result.data]


@app.get("/events/{event_id}")
def get_event(event_id: str, svc: EventService = Depends(get_service)):
    result = svc.get_event(event_id)
    if not result.success:
        raise _http_error(result.error)
    return _event_json(result.data)


NOT_FOUND_PAGE = """<!doctype html>
<html>
<head><meta charset="utf-8"/><title>Event Not Found</title></head>
<body style="font-family: Arial, sans-serif; text-align: center; padding: 64px;">
  <h1>404</h1>
  <p>This event could not be found.</p>
  <p><a href="/">Create an event</a></p>
</body>
</html>
"""


@app.get("/preview/{event_id}", response_class=HTMLResponse)
def preview_page(event_id: str, svc: EventService = Depends(get_service)):
    result = svc.get_event(event_id)
    if not result.success:
        if result.error.code == ErrorCode.NOT_FOUND:
            return HTMLResponse(NOT_FOUND_PAGE, status_code=404)
        raise _http_error(result.error)

    try:
        card = render_preview(result.data, PreviewFormat.from_settings())
    except RenderError as e:
        raise _http_error(e) from e
    return render_page(card, page_metadata(result.data))


@app.post("/preview")
def live_preview(payload: Dict[str, Any] = Body(...), svc: EventService = Depends(get_service)):
    """Render a draft as the user types. Never persists anything."""
    form = CreateEventForm(svc)
    form.load(payload)
    card = form.preview()
    return {
        "card": card.model_dump(by_alias=True) if card else None,
        "html": render_html(card) if card else None,
        "errors": form.errors,
    }


@app.get("/", response_class=HTMLResponse)
def ui():
    return """
<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <title>Create Event</title>
  <style>
    body { font-family: Arial, sans-serif; margin: 20px; }
    input, textarea, select, button { padding: 8px; }
    .layout { display: flex; gap: 32px; flex-wrap: wrap; }
    .col { flex: 1; min-width: 320px; }
    label { display: block; margin-top: 12px; font-weight: bold; }
    .err { color: #b91c1c; font-size: 12px; }
    .event-preview { border-radius: 8px; overflow: hidden; box-shadow: 0 4px 12px rgba(0,0,0,.15); }
    .banner { padding: 24px; }
    .details { background: #fff; padding: 16px; }
    .facts { display: flex; gap: 24px; }
    .label { color: #6b7280; font-size: 12px; margin: 0; }
    .value { font-size: 14px; font-weight: bold; margin: 0; }
  </style>
</head>
<body>
  <h2>Create Event</h2>
  <div class="layout">
    <form id="f" class="col" onsubmit="return submitEvent(event)">
      <label>Event Name</label>
      <input id="name" placeholder="Enter event name"/>
      <div class="err" id="err-name"></div>
      <label>Description</label>
      <textarea id="description" placeholder="Describe your event"></textarea>
      <label>Background Style</label>
      <select id="bgType"><option value="solid">Solid</option><option value="gradient">Gradient</option></select>
      <input type="color" id="color1" value="#ff5733"/>
      <input type="color" id="color2" value="#33ff57"/>
      <div class="err" id="err-background_style"></div>
      <label>Location</label>
      <input id="address" placeholder="Enter location"/>
      <label>Start Time</label>
      <input type="datetime-local" id="start"/>
      <label>End Time</label>
      <input type="datetime-local" id="end"/>
      <label>Capacity</label>
      <input type="number" id="capacity" placeholder="Enter max capacity"/>
      <div class="err" id="err-capacity"></div>
      <label><input type="checkbox" id="isPublic" checked/> Public Event</label>
      <label><input type="checkbox" id="requireApproval"/> Require Approval</label>
      <p><button id="submit" type="submit">Create Event</button></p>
    </form>
    <div class="col">
      <h3>Preview</h3>
      <div id="preview"></div>
    </div>
  </div>

<script>
function local(d){
  const pad = n => String(n).padStart(2, '0');
  return `${d.getFullYear()}-${pad(d.getMonth()+1)}-${pad(d.getDate())}T${pad(d.getHours())}:${pad(d.getMinutes())}`;
}
function instant(id){
  const v = document.getElementById(id).value;
  return v ? new Date(v).toISOString() : null;
}
function draft(){
  const type = document.getElementById('bgType').value;
  const c1 = document.getElementById('color1').value.toUpperCase();
  const c2 = document.getElementById('color2').value.toUpperCase();
  const address = document.getElementById('address').value;
  const capacity = document.getElementById('capacity').value;
  return {
    name: document.getElementById('name').value,
    description: document.getElementById('description').value,
    startTime: instant('start'),
    endTime: instant('end'),
    location: address ? {address} : null,
    backgroundStyle: {type, colors: type === 'solid' ? [c1] : [c1, c2]},
    isPublic: document.getElementById('isPublic').checked,
    requireApproval: document.getElementById('requireApproval').checked,
    capacity: capacity ? parseInt(capacity, 10) : null,
  };
}
async function refresh(){
  const res = await fetch('/preview', {method: 'POST', headers: {'Content-Type': 'application/json'}, body: JSON.stringify(draft())});
  const data = await res.json();
  document.getElementById('preview').innerHTML = data.html || '';
  document.querySelectorAll('.err').forEach(e => e.textContent = '');
  for (const [field, msg] of Object.entries(data.errors || {})) {
    const el = document.getElementById('err-' + field);
    if (el) el.textContent = msg;
  }
  document.getElementById('submit').disabled = Object.keys(data.errors || {}).length > 0;
}
async function submitEvent(e){
  e.preventDefault();
  const btn = document.getElementById('submit');
  btn.disabled = true;
  btn.textContent = 'Creating...';
  try {
    const res = await fetch('/events', {method: 'POST', headers: {'Content-Type': 'application/json'}, body: JSON.stringify(draft())});
    if (res.ok) {
      const ev = await res.json();
      window.location.href = `/preview/${ev.id}`;
      return false;
    }
    alert('Failed to create event. Please try again.');
  } catch (err) {
    alert('An error occurred. Please try again.');
  }
  btn.textContent = 'Create Event';
  await refresh();
  return false;
}
const now = new Date();
document.getElementById('start').value = local(now);
document.getElementById('end').value = local(new Date(now.getTime() + 3600000));
document.getElementById('f').addEventListener('input', refresh);
refresh();
</script>
</body>
</html>
"""
