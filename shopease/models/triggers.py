"""
Database-side maintenance of products.avg_rating.

MySQL gets the UpdateAvgRating / AddReview procedures and three triggers that
CALL UpdateAvgRating. SQLite has no stored procedures, so its triggers carry
the UPDATE inline. Everything is attached to the ratings table's
after_create/after_drop events, so db.create_all() and the initial migration
install the same objects.
"""
from sqlalchemy import DDL, event

from .rating import Rating

MYSQL_UPDATE_AVG_RATING = """
CREATE PROCEDURE UpdateAvgRating(IN prod_id INT)
BEGIN
    UPDATE products
    SET avg_rating = COALESCE((SELECT ROUND(AVG(rating), 2) FROM ratings WHERE product_id = prod_id), 0)
    WHERE id = prod_id;
END
"""

MYSQL_ADD_REVIEW = """
CREATE PROCEDURE AddReview(IN prod_id INT, IN cust_id INT, IN txt TEXT, IN rate INT)
BEGIN
    INSERT INTO reviews (product_id, customer_id, review_text, review_date) VALUES (prod_id, cust_id, txt, CURDATE());
    INSERT INTO ratings (product_id, customer_id, rating) VALUES (prod_id, cust_id, rate);
    CALL UpdateAvgRating(prod_id);
END
"""

MYSQL_TRIGGERS = [
    """
CREATE TRIGGER trg_update_avg_rating_after_insert
AFTER INSERT ON ratings
FOR EACH ROW
BEGIN
    CALL UpdateAvgRating(NEW.product_id);
END
""",
    """
CREATE TRIGGER trg_update_avg_rating_after_delete
AFTER DELETE ON ratings
FOR EACH ROW
BEGIN
    CALL UpdateAvgRating(OLD.product_id);
END
""",
    """
CREATE TRIGGER trg_update_avg_rating_after_update
AFTER UPDATE ON ratings
FOR EACH ROW
BEGIN
    CALL UpdateAvgRating(OLD.product_id);
    IF NEW.product_id <> OLD.product_id THEN
        CALL UpdateAvgRating(NEW.product_id);
    END IF;
END
""",
]

MYSQL_DROP_PROCEDURES = [
    'DROP PROCEDURE IF EXISTS AddReview',
    'DROP PROCEDURE IF EXISTS UpdateAvgRating',
]


def _sqlite_recompute(row):
    return (
        'UPDATE products SET avg_rating = '
        f'(SELECT COALESCE(ROUND(AVG(rating), 2), 0) FROM ratings WHERE product_id = {row}.product_id) '
        f'WHERE id = {row}.product_id;'
    )


SQLITE_TRIGGERS = [
    f"""
CREATE TRIGGER trg_update_avg_rating_after_insert
AFTER INSERT ON ratings
FOR EACH ROW
BEGIN
    {_sqlite_recompute('NEW')}
END
""",
    f"""
CREATE TRIGGER trg_update_avg_rating_after_delete
AFTER DELETE ON ratings
FOR EACH ROW
BEGIN
    {_sqlite_recompute('OLD')}
END
""",
    f"""
CREATE TRIGGER trg_update_avg_rating_after_update
AFTER UPDATE OF rating, product_id ON ratings
FOR EACH ROW
BEGIN
    {_sqlite_recompute('OLD')}
    {_sqlite_recompute('NEW')}
END
""",
]


def statements_for(dialect_name):
    """CREATE statements for a dialect, in execution order."""
    if dialect_name == 'mysql':
        return [MYSQL_UPDATE_AVG_RATING, MYSQL_ADD_REVIEW] + MYSQL_TRIGGERS
    if dialect_name == 'sqlite':
        return list(SQLITE_TRIGGERS)
    return []


def drop_statements_for(dialect_name):
    if dialect_name == 'mysql':
        return list(MYSQL_DROP_PROCEDURES)
    return []


def register_rating_triggers(table=Rating.__table__):
    for dialect_name in ('mysql', 'sqlite'):
        for statement in statements_for(dialect_name):
            event.listen(table, 'after_create', DDL(statement).execute_if(dialect=dialect_name))
        # triggers are dropped with the table; procedures are not
        for statement in drop_statements_for(dialect_name):
            event.listen(table, 'after_drop', DDL(statement).execute_if(dialect=dialect_name))
