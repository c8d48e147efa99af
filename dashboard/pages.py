"""
HTML pages for the dashboard.

Pages are rendered straight from the view model; every value coming from
the backend or the user is escaped.
"""

from datetime import datetime
from html import escape

from .models import AnalyticsRow, Article, Category, Comment, Profile, Tag
from .view_model import DashboardViewModel

TABS = ("overview", "profile", "articles", "categories", "tags", "comments", "analytics")
DEFAULT_TAB = "overview"

_STYLE = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
            background: #f9fafb;
            margin: 0;
            padding: 48px 16px;
            color: #111827;
        }
        .container { max-width: 1100px; margin: 0 auto; }
        .narrow { max-width: 420px; }
        .card {
            background: white;
            padding: 24px;
            border-radius: 8px;
            box-shadow: 0 1px 4px rgba(0,0,0,0.1);
            margin-bottom: 24px;
        }
        .header { display: flex; justify-content: space-between; align-items: center; }
        .muted { color: #6b7280; font-size: 14px; }
        .message { background: #f0fdf4; border: 1px solid #bbf7d0; color: #166534; padding: 12px 16px; border-radius: 6px; }
        .error { background: #fef2f2; border: 1px solid #fecaca; color: #991b1b; padding: 12px 16px; border-radius: 6px; }
        nav a { margin-right: 24px; padding: 12px 0; display: inline-block; color: #6b7280; text-decoration: none; }
        nav a.active { color: #2563eb; border-bottom: 2px solid #3b82f6; }
        .item { border: 1px solid #e5e7eb; border-radius: 8px; padding: 16px; margin-bottom: 12px; }
        .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(220px, 1fr)); gap: 16px; }
        .stat { background: #eff6ff; padding: 16px; border-radius: 8px; }
        .stat strong { display: block; font-size: 24px; }
        button { padding: 8px 16px; border: none; border-radius: 6px; color: white; cursor: pointer; }
        button:disabled { opacity: 0.5; }
        .primary { background: #2563eb; }
        .success { background: #16a34a; }
        .danger { background: #dc2626; }
        .link { background: none; color: #2563eb; padding: 0 4px; }
        input { width: 100%; padding: 8px; margin: 4px 0 16px 0; box-sizing: border-box; }
"""


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{escape(title)}</title>
    <style>{_STYLE}</style>
</head>
<body>
{body}
</body>
</html>
"""


def _text(value) -> str:
    return escape("" if value is None else str(value))


def _timestamp(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else ""


def _banners(view: DashboardViewModel) -> str:
    parts = []
    if view.message:
        parts.append(f'<div class="message">{_text(view.message)}</div>')
    if view.error:
        parts.append(f'<div class="error">{_text(view.error)}</div>')
    return "\n".join(parts)


def render_loading_page() -> str:
    return _page("Loading", '<div class="container"><p class="muted">Loading...</p></div>')


def render_auth_page(view: DashboardViewModel) -> str:
    """Sign-in / sign-up form."""
    form = view.form
    heading = "Sign in to your account" if form.is_login else "Create your account"
    prompt = "Don't have an account?" if form.is_login else "Already have an account?"
    toggle_label = "Sign up" if form.is_login else "Sign in"
    if view.auth_loading:
        submit_label = "Processing..."
    else:
        submit_label = "Sign in" if form.is_login else "Sign up"
    disabled = " disabled" if view.auth_loading else ""

    body = f"""<div class="container narrow">
  <div class="card">
    <h2>{heading}</h2>
    <form method="post" action="/auth/toggle" class="muted">
      {escape(prompt)}<button type="submit" class="link">{toggle_label}</button>
    </form>
    <form method="post" action="/auth/submit">
      <label for="email">Email address</label>
      <input id="email" name="email" type="email" required placeholder="Enter your email" value="{_text(form.email)}">
      <label for="password">Password</label>
      <input id="password" name="password" type="password" required placeholder="Enter your password">
      {_banners(view)}
      <p><button type="submit" class="primary"{disabled}>{submit_label}</button></p>
    </form>
  </div>
</div>"""
    return _page(heading, body)


# ─────────────────────────────────────────────────────────────
# Tab bodies
# ─────────────────────────────────────────────────────────────

def _overview_tab(view: DashboardViewModel) -> str:
    stats = [
        ("Articles", len(view.articles)),
        ("Categories", len(view.categories)),
        ("Tags", len(view.tags)),
        ("Comments", len(view.comments)),
    ]
    cells = "".join(
        f'<div class="stat">{name}<strong>{count}</strong></div>' for name, count in stats
    )
    return f'<div class="grid">{cells}</div>'


def _profile_tab(profile: Profile | None) -> str:
    if profile is None:
        return ""
    return f"""<div class="item">
  <h3>Profile Information</h3>
  <p><strong>ID:</strong> {_text(profile.id)}</p>
  <p><strong>Email:</strong> {_text(profile.email)}</p>
  <p><strong>Full Name:</strong> {_text(profile.full_name or "Not set")}</p>
  <p><strong>Role:</strong> {_text(profile.role)}</p>
  <p><strong>Created:</strong> {_timestamp(profile.created_at)}</p>
  <p><strong>Updated:</strong> {_timestamp(profile.updated_at)}</p>
</div>"""


def _article_item(article: Article) -> str:
    category = article.category.name if article.category and article.category.name else "None"
    author = article.author.display_name if article.author else "Unknown"
    return f"""<div class="item">
  <h4>{_text(article.title)}</h4>
  <p class="muted">Status: {_text(article.status)} | Language: {_text(article.language)} | AI Generated: {"Yes" if article.ai_generated else "No"}</p>
  <p class="muted">Category: {_text(category)} | Author: {_text(author)}</p>
</div>"""


def _category_item(category: Category) -> str:
    return f"""<div class="item">
  <h4>{_text(category.name)}</h4>
  <p class="muted">Slug: {_text(category.slug)}</p>
  <p class="muted">Priority: {category.priority}</p>
  <p class="muted">{_text(category.description)}</p>
</div>"""


def _tag_item(tag: Tag) -> str:
    return f"""<div class="item">
  <h4>{_text(tag.name)}</h4>
  <p class="muted">Slug: {_text(tag.slug)}</p>
</div>"""


def _comment_item(comment: Comment) -> str:
    author = comment.author.display_name if comment.author else "Unknown"
    return f"""<div class="item">
  <p class="muted">Status: {_text(comment.status)} | Author: {_text(author)}</p>
  <p>{_text(comment.content)}</p>
  <p class="muted">{_timestamp(comment.created_at)}</p>
</div>"""


def _analytics_item(row: AnalyticsRow) -> str:
    return f"""<div class="item">
  <p class="muted">Article ID: {_text(row.article_id)}</p>
  <p>Views: {row.views} | Shares: {row.shares}</p>
  <p class="muted">Date: {_text(row.date)}</p>
</div>"""


def _list_or_empty(items, render, empty: str | None) -> str:
    if not items:
        return f'<p class="muted">{empty}</p>' if empty else ""
    return "\n".join(render(item) for item in items)


def render_tab(view: DashboardViewModel, tab: str) -> str:
    if tab == "profile":
        return _profile_tab(view.profile)
    if tab == "articles":
        return _list_or_empty(view.articles, _article_item, "No articles found.")
    if tab == "categories":
        return f'<div class="grid">{_list_or_empty(view.categories, _category_item, None)}</div>'
    if tab == "tags":
        return f'<div class="grid">{_list_or_empty(view.tags, _tag_item, "No tags found.")}</div>'
    if tab == "comments":
        return _list_or_empty(view.comments, _comment_item, "No comments found.")
    if tab == "analytics":
        return _list_or_empty(view.analytics, _analytics_item, "No analytics data found.")
    return _overview_tab(view)


def tab_labels(view: DashboardViewModel) -> list[tuple[str, str]]:
    counts = view.counts()
    labels = []
    for tab in TABS:
        name = tab.capitalize()
        if tab in counts:
            name = f"{name} ({counts[tab]})"
        labels.append((tab, name))
    return labels


def render_dashboard_page(view: DashboardViewModel, tab: str = DEFAULT_TAB) -> str:
    """Tabbed dashboard for a signed-in user."""
    if tab not in TABS:
        tab = DEFAULT_TAB
    user = view.user
    email = user.email if user else ""

    profile_line = ""
    if view.profile:
        profile_line = (
            f'<p class="muted">Role: {_text(view.profile.role)} | '
            f"Profile ID: {_text(view.profile.id)}</p>"
        )

    seed_label = "Testing..." if view.data_loading else "Test DB Operations"
    logout_label = "Logging out..." if view.auth_loading else "Logout"
    seed_disabled = " disabled" if view.data_loading else ""
    logout_disabled = " disabled" if view.auth_loading else ""

    links = []
    for tab_id, label in tab_labels(view):
        active = ' class="active"' if tab_id == tab else ""
        links.append(f'<a href="/?tab={tab_id}"{active}>{escape(label)}</a>')
    nav = "".join(links)

    body = f"""<div class="container">
  <div class="card header">
    <div>
      <h1>Database Testing Dashboard</h1>
      <p class="muted">Logged in as: {_text(email)}</p>
      {profile_line}
    </div>
    <div>
      <form method="post" action="/seed" style="display:inline">
        <button type="submit" class="success"{seed_disabled}>{seed_label}</button>
      </form>
      <form method="post" action="/auth/logout" style="display:inline">
        <button type="submit" class="danger"{logout_disabled}>{logout_label}</button>
      </form>
    </div>
  </div>
  {_banners(view)}
  <div class="card">
    <nav>{nav}</nav>
    <div>{render_tab(view, tab)}</div>
  </div>
</div>"""
    return _page("Database Testing Dashboard", body)


def render_page(view: DashboardViewModel, tab: str = DEFAULT_TAB) -> str:
    """Pick the page for the current session state."""
    if view.loading:
        return render_loading_page()
    if view.user is None:
        return render_auth_page(view)
    return render_dashboard_page(view, tab)
