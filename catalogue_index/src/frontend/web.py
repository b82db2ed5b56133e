from __future__ import annotations
import argparse
from datetime import date
from typing import Any, Dict
from flask import Flask, request, jsonify, Response
from catindex.engine import Engine
from catindex.config import RECIPE, MAX_SUGGESTIONS, TOP_RATED, CACHE_CAPACITY

app = Flask(__name__)
_engine: Engine | None = None


def _eng() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Run frontend.web.main() or set frontend.web._engine.")
    return _engine


def _entity_json(e: Any) -> Dict[str, Any]:
    d: Dict[str, Any] = {"name": e.name, "average_rating": e.average_rating}
    for attr in ("cuisine", "preparation_time", "quantity", "unit"):
        if hasattr(e, attr):
            d[attr] = getattr(e, attr)
    return d


@app.errorhandler(ValueError)
def bad_request(exc: ValueError):
    return jsonify({"error": str(exc)}), 400


# ---------- API ----------
@app.get("/health")
def health():
    return jsonify({"ok": _engine is not None})


@app.get("/api/complete")
def api_complete():
    cls = request.args.get("cls", RECIPE, type=str)
    q = request.args.get("q", "", type=str)
    k = request.args.get("k", MAX_SUGGESTIONS, type=int)
    if not q:
        return jsonify([])
    return jsonify(_eng().complete(cls, q, k))


@app.get("/api/lookup")
def api_lookup():
    cls = request.args.get("cls", RECIPE, type=str)
    name = request.args.get("name", "", type=str)
    hit = _eng().lookup(cls, name) if name else None
    if hit is None:
        return jsonify({"error": f"{cls} {name!r} not found"}), 404
    return jsonify(_entity_json(hit))


@app.get("/api/prefix")
def api_prefix():
    cls = request.args.get("cls", RECIPE, type=str)
    q = request.args.get("q", "", type=str)
    return jsonify([_entity_json(e) for e in _eng().by_name_prefix(q, entity_class=cls)])


@app.get("/api/recipes/top")
def api_top_rated():
    n = request.args.get("n", TOP_RATED, type=int)
    return jsonify([_entity_json(e) for e in _eng().top_rated(n)])


@app.get("/api/recipes/rating")
def api_rating_range():
    lo = request.args.get("min", 0.0, type=float)
    hi = request.args.get("max", 5.0, type=float)
    return jsonify([_entity_json(e) for e in _eng().by_rating_range(lo, hi)])


@app.get("/api/recipes/dates")
def api_date_range():
    today = date.today().isoformat()
    start = date.fromisoformat(request.args.get("start", today, type=str))
    end = date.fromisoformat(request.args.get("end", today, type=str))
    return jsonify([_entity_json(e) for e in _eng().by_date_range(start, end)])


@app.get("/api/stats")
def api_stats():
    return jsonify(_eng().stats().to_dict())


# ---------- UI ----------
@app.get("/")
def home():
    # Single page, no external deps: type a prefix, get ranked names.
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Catalogue • Autocomplete</title>
<style>
:root{ --bg:#0b0f14; --panel:#0f141b; --ink:#cfd8e3; --muted:#8a94a6; --accent:#6ee7ff; --border:#1c2530; }
*{box-sizing:border-box}
body{ margin:0; background:var(--bg); color:var(--ink);
  font:16px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,"Helvetica Neue",Arial; }
.container{ max-width:720px; margin:24px auto; padding:0 16px; }
.card{ background:var(--panel); border:1px solid var(--border); border-radius:16px; padding:18px; }
h1{ font-size:20px; margin:0 0 8px 0 }
.controls{ display:flex; gap:12px; margin:12px 0 }
input,select{ padding:10px 12px; border-radius:10px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); font-size:16px; outline:none }
input{ flex:1 }
input:focus{ border-color:var(--accent) }
ol{ margin:8px 0 0 0; padding-left:24px }
.meta{ color:var(--muted); font-size:13px }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>Catalogue autocomplete</h1>
      <div class="controls">
        <select id="cls"><option value="recipe">Recipes</option><option value="ingredient">Ingredients</option></select>
        <input id="q" type="text" placeholder="Type a name prefix…" autocomplete="off" autofocus />
      </div>
      <div id="meta" class="meta">Ready.</div>
      <ol id="out"></ol>
    </div>
  </div>
<script>
const q = document.querySelector("#q"), cls = document.querySelector("#cls");
const out = document.querySelector("#out"), meta = document.querySelector("#meta");
let t;
async function search(){
  const prefix = q.value.trim();
  if(!prefix){ out.innerHTML = ""; meta.textContent = "Ready."; return; }
  const resp = await fetch(`/api/complete?cls=${cls.value}&q=${encodeURIComponent(prefix)}&k=10`);
  const data = resp.ok ? await resp.json() : [];
  meta.textContent = `Suggestions: ${data.length}`;
  out.innerHTML = data.map(n => `<li>${n.replace(/</g,"&lt;")}</li>`).join("");
}
q.addEventListener("input", ()=>{ clearTimeout(t); t = setTimeout(search, 150); });
cls.addEventListener("change", search);
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run Flask UI on top of the catalogue Engine")
    ap.add_argument("--catalogue", default=None, help="JSON catalogue to import")
    ap.add_argument("--db", dest="db", default=None)  # DSN: "memory://"
    ap.add_argument("--capacity", type=int, default=CACHE_CAPACITY)
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    global _engine
    _engine = Engine(cache_capacity=args.capacity)
    _engine.build(db_dsn=args.db, catalogue=args.catalogue, verbose=args.verbose)

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.shutdown()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
