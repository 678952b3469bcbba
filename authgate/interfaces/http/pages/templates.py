# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import render_template_string

_FORM_PAGE = """<!doctype html>
<html>
	<body>
		<h1>{{ title }}</h1>
		<form action="{{ action }}{% if query %}?{{ query }}{% endif %}" method="post">
			<input name="email" type="text" placeholder="Email" />
			<input name="password" type="password" placeholder="Password" />
			<input type="submit" />
		</form>
		<a href="{{ other }}{% if query %}?{{ query }}{% endif %}">{{ other_label }}</a>
	</body>
</html>
"""


def render_login_page(query: str) -> str:
    return render_template_string(
        _FORM_PAGE,
        title="Login",
        action="login",
        other="signup",
        other_label="Sign Up",
        query=query,
    )


def render_signup_page(query: str) -> str:
    return render_template_string(
        _FORM_PAGE,
        title="Sign Up",
        action="signup",
        other="login",
        other_label="Log In",
        query=query,
    )
