"""JSON endpoints under /api."""
import pytest


class TestProductEndpoints:
    def test_create_product(self, client):
        response = client.post('/api/products', json={'name': 'Desk Lamp', 'category': 'Home', 'price': '899.00'})
        assert response.status_code == 201
        product = response.get_json()['product']
        assert product['name'] == 'Desk Lamp'
        assert product['price'] == 899.0
        assert product['avg_rating'] == 0

    def test_negative_price_rejected(self, client):
        response = client.post('/api/products', json={'name': 'Lamp', 'category': 'Home', 'price': '-5'})
        assert response.status_code == 400
        assert 'price' in response.get_json()['errors']

    def test_missing_name_rejected(self, client):
        response = client.post('/api/products', json={'category': 'Home', 'price': '5'})
        assert response.status_code == 400
        assert 'name' in response.get_json()['errors']

    def test_list_by_category(self, client, sample):
        response = client.get('/api/products', query_string={'category': 'Fashion'})
        names = [p['name'] for p in response.get_json()['products']]
        assert names == ['Classic Sneakers', 'Urban Backpack']

    def test_unknown_product_is_404(self, client, sample):
        response = client.get('/api/products/999')
        assert response.status_code == 404
        assert response.get_json()['ok'] is False

    def test_product_reviews_newest_first(self, client, sample):
        response = client.get('/api/products/1/reviews')
        texts = [r['review_text'] for r in response.get_json()['reviews']]
        assert texts == ['Battery life could be better.', 'Great phone, fast and reliable!']

    def test_wrong_method_is_json_405(self, client, sample):
        response = client.put('/api/products/1', json={'name': 'x'})
        assert response.status_code == 405
        assert response.get_json() == {'ok': False, 'error': 'method not allowed'}

    def test_delete_product(self, client, sample):
        assert client.delete('/api/products/2').status_code == 200
        assert client.get('/api/products/2').status_code == 404


class TestCustomerEndpoints:
    def test_create_customer(self, client):
        response = client.post('/api/customers', json={'name': 'Ana Cruz', 'email': 'ana@email.com'})
        assert response.status_code == 201
        assert response.get_json()['customer']['email'] == 'ana@email.com'

    def test_duplicate_email(self, client, sample):
        response = client.post('/api/customers', json={'name': 'Juan Again', 'email': 'juan@email.com'})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'constraint violation'

    def test_invalid_email(self, client):
        response = client.post('/api/customers', json={'name': 'Ana', 'email': 'not-an-email'})
        assert response.status_code == 400

    def test_delete_customer_cascades(self, client, sample):
        assert client.delete('/api/customers/1').status_code == 200
        reviews = client.get('/api/products/1/reviews').get_json()['reviews']
        assert [r['customer_id'] for r in reviews] == [2]
        assert client.get('/api/products/1').get_json()['product']['avg_rating'] == 3.0


class TestFeedbackEndpoints:
    def test_submit_feedback_updates_average(self, client, sample):
        response = client.post('/api/products/4/feedback',
                               json={'customer_id': 2, 'review_text': 'Roomy.', 'rating': 2})
        assert response.status_code == 201
        assert response.get_json()['avg_rating'] == 2.0

    def test_submit_feedback_for_missing_product(self, client, sample):
        response = client.post('/api/products/999/feedback',
                               json={'customer_id': 2, 'review_text': 'Ghost.', 'rating': 2})
        assert response.status_code == 400

    def test_create_review(self, client, sample):
        response = client.post('/api/reviews', json={
            'product_id': 4, 'customer_id': 3, 'review_text': 'Good zipper.', 'review_date': '2025-06-05',
        })
        assert response.status_code == 201
        assert response.get_json()['review']['review_date'] == '2025-06-05'

    def test_review_for_missing_customer(self, client, sample):
        response = client.post('/api/reviews', json={'product_id': 1, 'customer_id': 99, 'review_text': 'x'})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'constraint violation'

    def test_edit_review(self, client, sample):
        response = client.patch('/api/reviews/1', json={'review_text': 'Updated review text.'})
        assert response.status_code == 200
        assert response.get_json()['review']['review_text'] == 'Updated review text.'

    def test_delete_review(self, client, sample):
        assert client.delete('/api/reviews/2').status_code == 200
        assert client.delete('/api/reviews/2').status_code == 404

    def test_rating_out_of_range(self, client, sample):
        response = client.post('/api/ratings', json={'product_id': 1, 'customer_id': 3, 'rating': 6})
        assert response.status_code == 400
        assert 'rating' in response.get_json()['errors']

    @pytest.mark.parametrize('score', [4.9, True, 'four', '4.5'])
    def test_non_integer_rating_rejected(self, client, sample, score):
        response = client.post('/api/ratings', json={'product_id': 4, 'customer_id': 1, 'rating': score})
        assert response.status_code == 400
        assert 'rating' in response.get_json()['errors']
        assert client.get('/api/products/4').get_json()['product']['avg_rating'] == 0

    def test_numeric_string_rating_accepted(self, client, sample):
        response = client.post('/api/ratings', json={'product_id': 4, 'customer_id': 1, 'rating': '4'})
        assert response.status_code == 201
        assert response.get_json()['rating']['rating'] == 4

    @pytest.mark.parametrize('score', [2.5, False])
    def test_non_integer_feedback_rating_rejected(self, client, sample, score):
        response = client.post('/api/products/4/feedback',
                               json={'customer_id': 2, 'review_text': 'Roomy.', 'rating': score})
        assert response.status_code == 400
        assert client.get('/api/products/4/reviews').get_json()['reviews'] == []

    def test_revise_with_fractional_score_rejected(self, client, sample):
        response = client.post('/api/feedback/revise', json={
            'rating_id': 2, 'rating': 4.9, 'review_id': 2, 'review_text': 'x',
        })
        assert response.status_code == 400
        assert client.get('/api/products/1').get_json()['product']['avg_rating'] == 4.0

    def test_rating_for_missing_product(self, client, sample):
        response = client.post('/api/ratings', json={'product_id': 999, 'customer_id': 3, 'rating': 4})
        assert response.status_code == 400

    def test_add_and_delete_rating(self, client, sample):
        created = client.post('/api/ratings', json={'product_id': 1, 'customer_id': 3, 'rating': 1})
        assert created.get_json()['avg_rating'] == 3.0
        rating_id = created.get_json()['rating']['id']
        deleted = client.delete(f'/api/ratings/{rating_id}')
        assert deleted.get_json()['avg_rating'] == 4.0

    def test_revise_feedback(self, client, sample):
        response = client.post('/api/feedback/revise', json={
            'rating_id': 2, 'rating': 4, 'review_id': 2, 'review_text': 'Updated for consistency.',
        })
        assert response.status_code == 200
        assert client.get('/api/products/1').get_json()['product']['avg_rating'] == 4.5

    def test_revise_missing_rows(self, client, sample):
        response = client.post('/api/feedback/revise', json={
            'rating_id': 99, 'rating': 4, 'review_id': 2, 'review_text': 'x',
        })
        assert response.status_code == 404


class TestReportEndpoints:
    def test_most_reviewed(self, client, sample):
        rows = client.get('/api/reports/most-reviewed').get_json()['rows']
        assert rows[0]['name'] == 'Smartphone X200'

    def test_search(self, client, sample):
        rows = client.get('/api/reports/search', query_string={'q': 'sound'}).get_json()['rows']
        assert [r['review_text'] for r in rows] == ['Amazing sound quality!']

    def test_by_category(self, client, sample):
        rows = client.get('/api/reports/by-category', query_string={'category': ['Fashion']}).get_json()['rows']
        assert rows == [{'review_text': 'Very comfortable sneakers.', 'category': 'Fashion'}]

    def test_unknown_report(self, client):
        response = client.get('/api/reports/nope')
        assert response.status_code == 404
