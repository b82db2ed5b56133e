"""Flask JSON API and a one-page autocomplete UI over catindex.Engine (see frontend.web)."""
