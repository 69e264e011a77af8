import json

import click
from flask.cli import with_appcontext
from sqlalchemy.exc import IntegrityError

from .extensions import db
from .models.rating import recompute_all_ratings
from .reports import REPORTS
from .sample_data import load_sample_data


@click.command('seed-sample')
@with_appcontext
def seed_sample():
    """Load the sample products, customers, reviews and ratings."""
    try:
        loaded = load_sample_data()
    except IntegrityError as e:
        db.session.rollback()
        raise click.ClickException(f'Sample data rejected: {e.orig}')
    if loaded:
        click.echo('Sample data loaded.')
    else:
        click.echo('Database already has products; nothing loaded.')


@click.command('recompute-ratings')
@with_appcontext
def recompute_ratings():
    """Recalculate products.avg_rating for every product."""
    count = recompute_all_ratings()
    click.echo(f'Recomputed average rating for {count} products.')


@click.command('report')
@click.argument('name', type=click.Choice(sorted(REPORTS)))
@click.option('--keyword', default='', help='Keyword for the search report.')
@click.option('--threshold', type=float, default=None, help='Threshold for the highly-rated report.')
@click.option('--category', 'categories', multiple=True, help='Category for the by-category report.')
@click.option('--any', 'any_of', multiple=True, help='Word that must appear (filter report).')
@click.option('--none', 'none_of', multiple=True, help='Word that must not appear (filter report).')
@click.option('--limit', type=int, default=None, help='Row limit for the most-reviewed report.')
@click.option('--customer-id', type=int, default=None, help='Customer for the review-history report.')
@with_appcontext
def report(name, keyword, threshold, categories, any_of, none_of, limit, customer_id):
    """Print a report as JSON lines."""
    kwargs = {
        'search': {'keyword': keyword},
        'highly-rated': {'threshold': threshold},
        'by-category': {'categories': list(categories)},
        'filter': {'any_of': list(any_of), 'none_of': list(none_of)},
        'most-reviewed': {'limit': limit},
        'review-history': {'customer_id': customer_id},
    }.get(name, {})
    for row in REPORTS[name](**kwargs):
        click.echo(json.dumps(row, ensure_ascii=False))


def register_commands(app):
    app.cli.add_command(seed_sample)
    app.cli.add_command(recompute_ratings)
    app.cli.add_command(report)
