"""CSV download buttons."""

from __future__ import annotations

import streamlit as st

from repohealth.export import export_bundle
from repohealth.models import NormalizationResult, RepoSummary


def render_downloads(repo: str, normalized: NormalizationResult, summary: RepoSummary) -> None:
    with st.expander("⬇️ Export CSV", expanded=False):
        files = export_bundle(repo, normalized, summary)
        cols = st.columns(len(files))
        for col, (filename, text) in zip(cols, files.items()):
            with col:
                st.download_button(
                    filename.removeprefix(repo.replace("/", "-") + "-"),
                    data=text,
                    file_name=filename,
                    mime="text/csv",
                    key=f"dl_{filename}",
                )
