from __future__ import annotations

from flask import Flask, jsonify, request

from .directory import find_branch, list_branches


def register(app: Flask) -> None:
    @app.route("/api/branches", methods=["GET"], endpoint="branches")
    def branches():
        query = (request.args.get("q") or "").strip()
        if not query:
            return jsonify({"success": True, "branches": [b.to_dict() for b in list_branches()]}), 200

        branch = find_branch(query)
        if branch is None:
            return jsonify({"success": False, "message": f"No branch matches {query!r}"}), 404
        return jsonify({"success": True, "branch": branch.to_dict()}), 200
