# Overview: HTTP-level tests for the JSON API (status codes, payloads, filters).

"""
API route tests.

Tests:
- CRUD status codes: 201 on create, 400 on invalid input, 404 on unknown id
- Stock, pipeline and payment status endpoints
- Reports (JSON and CSV), dashboard, settings and health
"""

import json

from conftest import make_order


class TestProductRoutes:
    """/api/products"""

    def test_create_and_fetch(self, client):
        response = client.post('/api/products', json={'name': 'Soap', 'currentStock': 5})
        assert response.status_code == 201
        product = response.get_json()
        assert product['Id'] == 1

        response = client.get(f"/api/products/{product['Id']}")
        assert response.status_code == 200
        assert response.get_json()['name'] == 'Soap'

    def test_invalid_create_is_400(self, client):
        response = client.post('/api/products', json={'currentStock': 5})
        assert response.status_code == 400
        assert 'name' in response.get_json()['error']

    def test_unknown_id_is_404(self, client):
        assert client.get('/api/products/9').status_code == 404
        assert client.put('/api/products/9', json={'name': 'x'}).status_code == 404
        assert client.delete('/api/products/9').status_code == 404

    def test_delete(self, client):
        client.post('/api/products', json={'name': 'Soap'})
        response = client.delete('/api/products/1')
        assert response.status_code == 200
        assert response.get_json()['name'] == 'Soap'
        assert client.get('/api/products/1').status_code == 404

    def test_list_filters(self, client):
        client.post('/api/products', json={'name': 'Lemon Handwash', 'category': 'Handwash'})
        client.post('/api/products', json={'name': 'Pine Phenyl', 'category': 'Phenyl'})
        body = client.get('/api/products?q=lemon').get_json()
        assert body['count'] == 1
        assert body['items'][0]['name'] == 'Lemon Handwash'
        assert client.get('/api/products?category=Phenyl').get_json()['count'] == 1

    def test_stock_movement(self, client):
        client.post('/api/products', json={'name': 'Soap', 'currentStock': 0, 'minStock': 5})
        assert client.post('/api/products/1/stock', json={'quantity': '3'}).get_json()['currentStock'] == 3
        response = client.post('/api/products/1/stock', json={'quantity': 5, 'direction': 'out'})
        assert response.get_json()['currentStock'] == 0
        low = client.get('/api/products/low-stock').get_json()
        assert [p['Id'] for p in low['items']] == [1]

    def test_stock_movement_errors(self, client):
        client.post('/api/products', json={'name': 'Soap'})
        assert client.post('/api/products/1/stock', json={}).status_code == 400
        assert client.post('/api/products/1/stock', json={'quantity': -1}).status_code == 400
        assert client.post('/api/products/2/stock', json={'quantity': 1}).status_code == 404


class TestCustomerRoutes:
    """/api/customers"""

    def test_pipeline_stage(self, client):
        customer = client.post('/api/customers', json={'name': 'Acme'}).get_json()
        assert customer['pipelineStage'] == 'new'

        response = client.post(f"/api/customers/{customer['Id']}/pipeline-stage", json={'stage': 'closed'})
        assert response.status_code == 200
        assert response.get_json()['pipelineStage'] == 'closed'
        assert response.get_json()['lastContact']

        response = client.post(f"/api/customers/{customer['Id']}/pipeline-stage", json={'stage': 'lost'})
        assert response.status_code == 400

    def test_advance(self, client):
        client.post('/api/customers', json={'name': 'Acme'})
        assert client.post('/api/customers/1/advance').get_json()['pipelineStage'] == 'contacted'

    def test_search_and_stage_filter(self, seeded_client):
        body = seeded_client.get('/api/customers?stage=closed').get_json()
        assert body['count'] == 2
        body = seeded_client.get('/api/customers?q=cleanmart').get_json()
        assert [c['Id'] for c in body['items']] == [2]

    def test_customer_invoices(self, seeded_client):
        body = seeded_client.get('/api/customers/4/invoices').get_json()
        assert [i['Id'] for i in body['items']] == [2]


class TestSalesOrderRoutes:
    """/api/sales-orders and /api/invoices"""

    def test_create_assigns_invoice_number(self, client):
        response = client.post('/api/sales-orders', json=make_order())
        assert response.status_code == 201
        order = response.get_json()
        assert order['invoiceNumber'].startswith('INV-')
        assert order['invoiceNumber'].endswith('-0001')
        assert order['paymentStatus'] == 'pending'

    def test_payment_status(self, client):
        client.post('/api/sales-orders', json=make_order())
        response = client.post('/api/sales-orders/1/payment-status', json={'status': 'paid'})
        assert response.get_json()['paymentStatus'] == 'paid'
        assert client.post('/api/sales-orders/1/payment-status', json={'status': 'void'}).status_code == 400
        assert client.get('/api/sales-orders?status=paid').get_json()['count'] == 1

    def test_month_filter(self, seeded_client):
        body = seeded_client.get('/api/sales-orders?year=2026&month=10').get_json()
        assert [o['Id'] for o in body['items']] == [2, 3]

    def test_order_invoices(self, seeded_client):
        body = seeded_client.get('/api/sales-orders/1/invoices').get_json()
        assert [i['Id'] for i in body['items']] == [1]

    def test_invoice_crud(self, client):
        response = client.post('/api/invoices', json=make_order(orderId=''))
        assert response.status_code == 201
        invoice = response.get_json()
        assert invoice['orderId'] is None
        assert invoice['dueDate'] > invoice['invoiceDate']
        response = client.post(f"/api/invoices/{invoice['Id']}/payment-status", json={'status': 'partial'})
        assert response.get_json()['paymentStatus'] == 'partial'


class TestExpenseRoutes:
    """/api/expenses"""

    def test_create_and_filter(self, client):
        response = client.post('/api/expenses', json={'category': 'Transport', 'amount': '120.5'})
        assert response.status_code == 201
        assert response.get_json()['amount'] == 120.5
        assert client.get('/api/expenses?category=Transport').get_json()['count'] == 1
        assert client.get('/api/expenses?category=Office').get_json()['count'] == 0

    def test_invalid_amount(self, client):
        response = client.post('/api/expenses', json={'category': 'Transport', 'amount': -5})
        assert response.status_code == 400

    def test_nan_amount_is_400(self, client):
        response = client.post(
            '/api/expenses',
            data='{"category": "Transport", "amount": NaN}',
            content_type='application/json',
        )
        assert response.status_code == 400
        assert client.get('/api/expenses').get_json()['count'] == 0


class TestReportRoutes:
    """/api/reports"""

    def test_sales_report(self, seeded_client):
        response = seeded_client.get('/api/reports/sales?start=2026-10-01&end=2026-10-31')
        assert response.status_code == 200
        report = response.get_json()
        assert report['totals']['totalOrders'] == 2
        assert report['totals']['totalRevenue'] == 6852 + 2970
        assert report['metrics'][0]['value'] == '$9,822.00'

    def test_currency_follows_settings(self, seeded_client):
        seeded_client.put('/api/settings/appearance', json={'currency': 'INR'})
        report = seeded_client.get('/api/reports/inventory').get_json()
        assert report['metrics'][1]['value'].startswith('₹')

    def test_overview(self, seeded_client):
        report = seeded_client.get('/api/reports/overview?start=2026-10-01&end=2026-10-31').get_json()
        assert report['totals']['expenses'] == 2200 + 3150 + 1800
        assert report['totals']['lowStockCount'] == 2

    def test_errors(self, client):
        assert client.get('/api/reports/payroll').status_code == 400
        assert client.get('/api/reports/sales').status_code == 400
        assert client.get('/api/reports/sales?start=soon&end=2026-10-31').status_code == 400

    def test_csv_export(self, seeded_client):
        response = seeded_client.get('/api/reports/expenses/export.csv?start=2026-10-01&end=2026-10-31')
        assert response.status_code == 200
        assert response.mimetype == 'text/csv'
        lines = response.get_data(as_text=True).splitlines()
        assert lines[0] == 'Category,Amount,Total'
        assert lines[1].startswith('Utilities,')


class TestDashboardAndSystem:
    """/api/dashboard, /health"""

    def test_dashboard(self, seeded_client):
        body = seeded_client.get('/api/dashboard').get_json()
        assert body['totalProducts'] == 6
        assert body['lowStockCount'] == 2
        assert body['totalCustomers'] == 4
        assert body['newLeads'] == 1
        assert body['pendingPayments'] == 2970
        assert [o['Id'] for o in body['recentOrders']] == [3, 2, 1]

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        body = response.get_json()
        assert body['status'] == 'ok'
        assert body['checks']['stores']['details']['products'] == 0

    def test_cors_header_for_known_origin(self, client):
        response = client.get('/health', headers={'Origin': 'http://localhost:5173'})
        assert response.headers['Access-Control-Allow-Origin'] == 'http://localhost:5173'


class TestSettingsRoutes:
    """/api/settings"""

    def test_update_reset_export_import(self, client):
        response = client.put('/api/settings/profile', json={'firstName': 'Asha'})
        assert response.get_json()['profile']['firstName'] == 'Asha'
        assert client.put('/api/settings/unknown', json={}).status_code == 400

        exported = client.get('/api/settings/export').get_data(as_text=True)
        client.post('/api/settings/reset', json={})
        assert client.get('/api/settings').get_json()['profile']['firstName'] == 'John'

        response = client.post('/api/settings/import', data=exported, content_type='application/json')
        assert response.get_json()['profile']['firstName'] == 'Asha'
        assert json.loads(exported)['profile']['firstName'] == 'Asha'

    def test_import_rejects_non_object_section(self, client):
        response = client.post('/api/settings/import', data='{"appearance": "dark"}', content_type='application/json')
        assert response.status_code == 400

    def test_reports_survive_malformed_settings_file(self, app, client):
        with open(app.config['SETTINGS_PATH'], 'w', encoding='utf-8') as fh:
            json.dump({'appearance': 'dark'}, fh)
        client.post('/api/products', json={'name': 'Soap', 'sellingPrice': 2, 'currentStock': 5})
        response = client.get('/api/reports/inventory')
        assert response.status_code == 200
        assert response.get_json()['metrics'][1]['value'] == '$10.00'
        assert client.get('/api/reports/inventory/export.csv').status_code == 200

    def test_import_invalid(self, client):
        response = client.post('/api/settings/import', data='garbage', content_type='text/plain')
        assert response.status_code == 400
