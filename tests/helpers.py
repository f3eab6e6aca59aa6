from rental_scraper.scrapers import BrowserRenderer, HttpFetcher


class FakeResponse:
    def __init__(self, status_code=200, text="", reason="OK"):
        self.status_code = status_code
        self.text = text
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 400


class FakeSession:
    """Sessão HTTP em memória: devolve a resposta configurada e registra chamadas"""

    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.error:
            raise self.error
        return self.response


class FakeDriver:
    def __init__(self, html="", navigation_error=None, source_error=None):
        self.html = html
        self.navigation_error = navigation_error
        self.source_error = source_error
        self.visited = []
        self.page_load_timeout = None
        self.quit_calls = 0

    def set_page_load_timeout(self, seconds):
        self.page_load_timeout = seconds

    def get(self, url):
        self.visited.append(url)
        if self.navigation_error:
            raise self.navigation_error

    @property
    def page_source(self):
        if self.source_error:
            raise self.source_error
        return self.html

    def quit(self):
        self.quit_calls += 1


class FakeRenderer(BrowserRenderer):
    """BrowserRenderer com o Chrome substituído por um driver falso"""

    def __init__(self, driver=None, creation_error=None):
        super().__init__(settle_seconds=0)
        self.driver = driver
        self.creation_error = creation_error
        self.created = 0

    def _create_webdriver(self):
        self.created += 1
        if self.creation_error:
            raise self.creation_error
        return self.driver


def make_fetcher(status_code=200, text="", reason="OK", error=None):
    session = FakeSession(FakeResponse(status_code, text, reason), error)
    return HttpFetcher(session_factory=lambda: session), session


IMOVELWEB_HTML = """
<html><body>
  <h1 class="property-title">Apartamento 2 quartos no Batel</h1>
  <div class="location-address">Rua Bispo Dom José, 2000, Batel, Curitiba/PR</div>
  <div class="price-items">
    <div class="price-item">
      <span class="price-item-label">Aluguel</span>
      <span class="price-item-value">R$ 2.500</span>
    </div>
    <div class="price-item">
      <span class="price-item-label">Condomínio</span>
      <span class="price-item-value">R$ 650</span>
    </div>
  </div>
  <p>IPTU R$ 120</p>
  <div class="gallery"><img data-src="https://img.imovelweb.com/1.jpg" width="80"></div>
  <img src="https://img.imovelweb.com/2.jpg">
  <img src="https://img.imovelweb.com/logo.png">
  <img src="https://img.imovelweb.com/thumb.jpg" width="50">
  <img src="https://img.imovelweb.com/plant.svg">
</body></html>
"""

VIVAREAL_HTML = """
<html><body>
  <h1 class="property-card__title">Apartamento com 3 quartos para alugar</h1>
  <p class="property-card__address">Rua Samuel Cézar - Água Verde - Curitiba</p>
  <div class="price-info-value">Aluguel R$ 3.200 /mês</div>
  <ul>
    <li class="price__list-value">Condomínio <span class="js-price">R$ 780</span></li>
    <li class="price__list-value">IPTU <span class="js-price">R$ 95</span></li>
  </ul>
  <picture><img src="https://resizedimgs.vivareal.com/a.jpg" width="120"></picture>
  <img src="https://resizedimgs.vivareal.com/b.jpg" width="640">
  <img src="https://resizedimgs.vivareal.com/icon-star.png">
</body></html>
"""

QUINTOANDAR_HTML = """
<html><body>
  <h1 data-testid="listing-title">Apartamento para alugar com 1 quarto</h1>
  <p data-testid="listing-address">Rua Augusta, 123, Jardins, São Paulo/SP, 01305-000</p>
  <div data-testid="price-info">Aluguel R$ 2.000</div>
  <span class="condo-cost">Condomínio R$ 500</span>
  <span class="tax-cost">IPTU R$ 80</span>
  <div class="gallery-wrapper">
    <img src="https://www.quintoandar.com.br/img/1.jpg" width="60">
  </div>
  <img src="https://d1.cloudfront.net/2.jpg" width="800" height="600">
  <img src="https://other.cdn.com/3.jpg">
  <img src="https://d1.cloudfront.net/tiny.jpg" width="300" height="40">
</body></html>
"""

CHAVESNAMAO_HTML = """
<html><body>
  <h1 class="property-title">Casa com 3 quartos para alugar</h1>
  <span class="property-address">Rua das Flores - Centro - Curitiba</span>
  <div>Aluguel<br>R$ 2.200/mês</div>
  <div>Condomínio R$ 288/mês</div>
  <div>IPTU R$ 98</div>
  <div class="photo-list"><img src="https://www.chavesnamao.com.br/imn/1.jpg" width="90"></div>
  <img src="https://www.chavesnamao.com.br/imn/2.jpg">
  <img src="https://cdn.example.com/x.jpg">
</body></html>
"""

SCENARIO_A_HTML = (
    '<html><head><script type="application/ld+json">'
    '{"@type":"Apartment","name":"Studio Central","address":"Rua X, 10, Centro, Curitiba/PR"}'
    "</script></head><body></body></html>"
)
