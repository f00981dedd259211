"""Infrastructure layer: state persistence and the workspace facade."""
